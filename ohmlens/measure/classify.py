# Copyright (c) 2026 Ohmlens
# SPDX-License-Identifier: MIT

"""
Closest-color classification.

A pixel is matched against user-taught custom colors and every catalog
swatch by CIE76 ΔE. Raw distances are scaled by a bias policy before they
are compared. The policy compensates for two empirical failure modes:

1. Gold confused with Yellow/Orange: resolved by hue + chroma gating.
2. Gold confused with beige/tan bodies: resolved by chroma thresholds
   in both directions.

The policy is a flat table of named rules so the weights are visible and
testable on their own.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterable, Optional

import numpy as np

from ohmlens.schema import ColorRole, CustomColor, LabColor, ReferenceColor, RGBColor
from ohmlens.measure import catalog
from ohmlens.measure.colorspace import rgb_to_lab, srgb_uint8_to_lab


# Custom colors were taught explicitly, so they are trusted over the catalog.
# 0.7 rather than stronger: shadowed bands drift toward learned dark colors.
CUSTOM_COLOR_BIAS = 0.7


@dataclass(frozen=True, slots=True)
class PixelTraits:
    """Perceptual features of the pixel being classified, computed once."""
    lab: LabColor
    chroma: float
    hue: float

    @property
    def is_gold_like(self) -> bool:
        """Saturated and in the yellow-orange hue wedge typical of gold paint."""
        return self.chroma > 30 and 60 < self.hue < 100

    @classmethod
    def of(cls, rgb: RGBColor) -> PixelTraits:
        lab = rgb_to_lab(rgb.r, rgb.g, rgb.b)
        return cls(lab=lab, chroma=lab.chroma, hue=lab.hue)


# =============================================================================
# Bias Policy
# =============================================================================


@dataclass(frozen=True)
class BiasRule:
    """
    A conditional distance multiplier.

    Attributes:
        name: Stable identifier for the rule
        applies: Predicate on the candidate reference color
        factor: Multiplier as a function of the pixel's traits
    """
    name: str
    applies: Callable[[ReferenceColor], bool]
    factor: Callable[[PixelTraits], float]


def _neutral_penalty(px: PixelTraits) -> float:
    # A saturated pixel is unlikely to be a neutral swatch
    return 1.0 + px.chroma / 50.0 if px.chroma > 10 else 1.0


def _gold_affinity(px: PixelTraits) -> float:
    return 0.55 if px.is_gold_like else 0.75


def _body_chroma(px: PixelTraits) -> float:
    if px.chroma > 35:
        return 1.5
    if px.chroma < 15:
        return 0.85
    return 0.95


BIAS_POLICY: tuple[BiasRule, ...] = (
    BiasRule(
        name="neutral-chroma-penalty",
        applies=lambda ref: ref.neutral,
        factor=_neutral_penalty,
    ),
    BiasRule(
        name="gold-affinity",
        applies=lambda ref: ref.name == catalog.GOLD,
        factor=_gold_affinity,
    ),
    BiasRule(
        name="silver-affinity",
        applies=lambda ref: ref.name == catalog.SILVER,
        factor=lambda px: 0.8,
    ),
    BiasRule(
        name="body-chroma",
        applies=lambda ref: ref.is_body,
        factor=_body_chroma,
    ),
)


def bias_factor(
    ref: ReferenceColor,
    traits: PixelTraits,
    policy: Iterable[BiasRule] = BIAS_POLICY,
) -> float:
    """Product of all policy multipliers that apply to ``ref``."""
    factor = 1.0
    for rule in policy:
        if rule.applies(ref):
            factor *= rule.factor(traits)
    return factor


# =============================================================================
# Classification
# =============================================================================

# Swatch Lab values are fixed; compute them once.
_SWATCHES = tuple(catalog.swatches())
_SWATCH_LAB = srgb_uint8_to_lab(
    np.array([s.rgb.as_tuple() for s, _ in _SWATCHES], dtype=np.float64)
)


def _custom_as_reference(custom: CustomColor) -> ReferenceColor:
    """Resolve a learned color to its catalog identity when it has one."""
    known = catalog.lookup(custom.name)
    if known is not None:
        return known
    role = ColorRole.BODY if catalog.is_body_name(custom.name) else ColorRole.CUSTOM
    return ReferenceColor(name=custom.name, rgb=custom.rgb, role=role)


def find_closest_color(
    pixel: RGBColor,
    custom_colors: Iterable[CustomColor] = (),
    *,
    policy: Iterable[BiasRule] = BIAS_POLICY,
) -> ReferenceColor:
    """
    Return the reference color that best matches ``pixel``.

    Never fails. Custom colors compete with catalog swatches on
    biased distance; catalog ties go to the later swatch. The winner is
    always a canonical color: alias swatches (Gold_*, Violet_Dark) resolve
    to their owner.

    Args:
        pixel: Color to classify
        custom_colors: User-taught corrections (snapshot for this request)
        policy: Bias rules applied to catalog distances

    Returns:
        Canonical ReferenceColor
    """
    policy = tuple(policy)
    traits = PixelTraits.of(pixel)
    pixel_lab = np.array([traits.lab.l, traits.lab.a, traits.lab.b])

    min_dist = float("inf")
    closest: Optional[ReferenceColor] = None

    customs = tuple(custom_colors)
    if customs:
        custom_lab = srgb_uint8_to_lab(
            np.array([c.rgb.as_tuple() for c in customs], dtype=np.float64)
        )
        dists = np.sqrt(np.sum((custom_lab - pixel_lab) ** 2, axis=-1))
        for custom, dist in zip(customs, dists):
            biased = float(dist) * CUSTOM_COLOR_BIAS
            if biased < min_dist:
                min_dist = biased
                closest = _custom_as_reference(custom)

    dists = np.sqrt(np.sum((_SWATCH_LAB - pixel_lab) ** 2, axis=-1))
    for (_, owner), dist in zip(_SWATCHES, dists):
        biased = float(dist) * bias_factor(owner, traits, policy)
        if biased <= min_dist:
            min_dist = biased
            closest = owner

    if closest is None:
        return catalog.CATALOG[0]
    return closest
