"""
Availability ledger.
Derives allocated and free quantities for equipment from active rental
assignments. Read-only; every figure is computed fresh from persisted rows.
"""

from database import read_snapshot
from utils.errors import NotFoundError

# Stock and active allocation read in a single statement so both figures
# come from the same snapshot.
_LEDGER_QUERY = '''
    SELECT e.id AS equipment_id, e.name, e.category, e.rentable,
           e.quantity_in_stock,
           COALESCE((
               SELECT SUM(ra.quantity) FROM rental_assignments ra
               WHERE ra.equipment_id = e.id AND ra.status = 'active'
           ), 0) AS allocated
    FROM equipment e
'''


def _ledger_entry(row) -> dict:
    entry = dict(row)
    entry['rentable'] = bool(entry['rentable'])
    entry['available'] = entry['quantity_in_stock'] - entry['allocated']
    return entry


def get_equipment_availability(equipment_id: str) -> dict:
    """
    Get the ledger entry for one equipment item.

    Args:
        equipment_id: Equipment ID

    Returns:
        dict: {equipment_id, name, category, rentable, quantity_in_stock,
               allocated, available}

    Raises:
        NotFoundError: If the equipment does not exist
    """
    with read_snapshot() as conn:
        row = conn.execute(_LEDGER_QUERY + ' WHERE e.id = ?', (equipment_id,)).fetchone()

    if row is None:
        raise NotFoundError('equipment', equipment_id)
    return _ledger_entry(row)


def active_allocated(equipment_id: str) -> int:
    """Sum of quantities held by active rental assignments for an item."""
    return get_equipment_availability(equipment_id)['allocated']


def available(equipment_id: str) -> int:
    """Units of an item free to reserve: stock minus active allocation."""
    return get_equipment_availability(equipment_id)['available']


def get_availability_summary(category: str = None, rentable_only: bool = False) -> list:
    """
    Ledger entries for the whole catalog, for catalog display.

    Args:
        category: Filter by category
        rentable_only: Only rentable items

    Returns:
        list: Ledger entry dicts ordered by category and name
    """
    query = _LEDGER_QUERY + ' WHERE 1=1'
    params = []

    if category:
        query += ' AND e.category = ?'
        params.append(category)

    if rentable_only:
        query += ' AND e.rentable = 1'

    query += ' ORDER BY e.category, e.name'

    with read_snapshot() as conn:
        rows = conn.execute(query, params).fetchall()
    return [_ledger_entry(row) for row in rows]
