# vault_ledger/types/pools.py

import enum
from typing import Optional

from msgspec import Struct


class PoolCapabilities(Struct, frozen=True):
    has_virtual_supply: bool = False
    is_stable_like: bool = False
    is_variable_weight: bool = False
    is_linear: bool = False
    is_composable_stable: bool = False

    @property
    def premints_on_join(self) -> bool:
        """Pool initialization reports the preminted share amount in its join deltas"""
        return self.has_virtual_supply and not self.is_linear


class PoolType(str, enum.Enum):
    WEIGHTED = "Weighted"
    STABLE = "Stable"
    META_STABLE = "MetaStable"
    ELEMENT = "Element"
    LIQUIDITY_BOOTSTRAPPING = "LiquidityBootstrapping"
    INVESTMENT = "Investment"
    STABLE_PHANTOM = "StablePhantom"
    COMPOSABLE_STABLE = "ComposableStable"
    HIGH_AMP_COMPOSABLE_STABLE = "HighAmpComposableStable"
    AAVE_LINEAR = "AaveLinear"
    LINEAR = "Linear"
    EULER_LINEAR = "EulerLinear"
    ERC4626_LINEAR = "ERC4626Linear"
    BEEFY_LINEAR = "BeefyLinear"
    GEARBOX_LINEAR = "GearboxLinear"
    MIDAS_LINEAR = "MidasLinear"
    REAPER_LINEAR = "ReaperLinear"
    SILO_LINEAR = "SiloLinear"
    TETU_LINEAR = "TetuLinear"
    YEARN_LINEAR = "YearnLinear"
    GYRO2 = "Gyro2"
    GYRO3 = "Gyro3"
    GYROE = "GyroE"
    FX = "FX"
    MANAGED = "Managed"
    UNKNOWN = "Unknown"

    @property
    def capabilities(self) -> PoolCapabilities:
        return _CAPABILITIES.get(self, PoolCapabilities())

    @classmethod
    def from_name(cls, name: Optional[str]) -> "PoolType":
        if not name:
            return cls.UNKNOWN
        try:
            return cls(name)
        except ValueError:
            return cls.UNKNOWN

    @classmethod
    def from_index(cls, index: int) -> Optional["PoolType"]:
        """Resolve a curated pool-type index; None when out of range"""
        if index < 0 or index >= len(POOL_TYPES):
            return None
        return POOL_TYPES[index]


LINEAR_POOL_TYPES = (
    PoolType.AAVE_LINEAR,
    PoolType.LINEAR,
    PoolType.EULER_LINEAR,
    PoolType.ERC4626_LINEAR,
    PoolType.BEEFY_LINEAR,
    PoolType.GEARBOX_LINEAR,
    PoolType.MIDAS_LINEAR,
    PoolType.REAPER_LINEAR,
    PoolType.SILO_LINEAR,
    PoolType.TETU_LINEAR,
    PoolType.YEARN_LINEAR,
)

COMPOSABLE_STABLE_POOL_TYPES = (
    PoolType.COMPOSABLE_STABLE,
    PoolType.HIGH_AMP_COMPOSABLE_STABLE,
)

STABLE_LIKE_POOL_TYPES = (
    PoolType.STABLE,
    PoolType.META_STABLE,
    PoolType.STABLE_PHANTOM,
) + COMPOSABLE_STABLE_POOL_TYPES

VARIABLE_WEIGHT_POOL_TYPES = (
    PoolType.LIQUIDITY_BOOTSTRAPPING,
    PoolType.INVESTMENT,
    PoolType.MANAGED,
)

VIRTUAL_SUPPLY_POOL_TYPES = (
    PoolType.STABLE_PHANTOM,
    PoolType.MANAGED,
) + LINEAR_POOL_TYPES + COMPOSABLE_STABLE_POOL_TYPES


def _build_capabilities():
    table = {}
    for pool_type in PoolType:
        table[pool_type] = PoolCapabilities(
            has_virtual_supply=pool_type in VIRTUAL_SUPPLY_POOL_TYPES,
            is_stable_like=pool_type in STABLE_LIKE_POOL_TYPES,
            is_variable_weight=pool_type in VARIABLE_WEIGHT_POOL_TYPES,
            is_linear=pool_type in LINEAR_POOL_TYPES,
            is_composable_stable=pool_type in COMPOSABLE_STABLE_POOL_TYPES,
        )
    return table


_CAPABILITIES = _build_capabilities()

# Ordering used by the curated setPoolType signal; append only
POOL_TYPES = tuple(pool_type for pool_type in PoolType if pool_type is not PoolType.UNKNOWN)
