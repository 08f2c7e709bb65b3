"""Keg / drum / liter conversions."""
from decimal import Decimal
from typing import Dict

# Liters held by one keg
KEG_CAPACITY_LITERS = Decimal('25')

# Kegs poured into one wholesale drum
KEGS_PER_DRUM = 9


def liters_for(unit_size_kegs, keg_capacity_liters=KEG_CAPACITY_LITERS) -> Decimal:
    """Liters held by a unit of ``unit_size_kegs`` kegs."""
    return Decimal(unit_size_kegs) * Decimal(keg_capacity_liters)


def drum_capacity_liters(keg_capacity_liters=KEG_CAPACITY_LITERS, kegs_per_drum=KEGS_PER_DRUM) -> Decimal:
    return liters_for(kegs_per_drum, keg_capacity_liters)


def fill_details(total_liters, keg_capacity_liters=KEG_CAPACITY_LITERS,
                 kegs_per_drum=KEGS_PER_DRUM) -> Dict[str, Decimal]:
    """
    Break a liters amount down into drums and kegs.

    Returns:
        dict with:
        - total_drums: full drums that can be filled
        - total_kegs: full kegs that can be filled
        - remaining_kegs: full kegs left over after the full drums
        - remaining_liters: liters left over after the full kegs
    """
    liters = max(Decimal('0'), Decimal(total_liters))
    keg = Decimal(keg_capacity_liters)
    drum = drum_capacity_liters(keg, kegs_per_drum)

    liters_after_drums = liters % drum

    return {
        'total_drums': int(liters // drum),
        'total_kegs': int(liters // keg),
        'remaining_kegs': int(liters_after_drums // keg),
        'remaining_liters': liters % keg,
    }
