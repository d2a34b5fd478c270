"""
Equipment catalog.
Lookup and catalog management for rentable equipment items.
"""

import logging
import uuid
from decimal import Decimal

from database import read_snapshot, transaction
from extensions import resource_locks
from utils.audit import log_audit
from utils.errors import NotFoundError, ValidationError
from utils.locking import resource_key
from utils.validators import validate_rate, validate_required_text, validate_stock

logger = logging.getLogger(__name__)


def _row_to_equipment(row) -> dict:
    """Convert an equipment row into the public dict shape."""
    if row is None:
        return None
    item = dict(row)
    item['rentable'] = bool(item['rentable'])
    item['daily_rent_rate'] = str(Decimal(item['daily_rent_rate']))
    return item


# =============================================================================
# READ
# =============================================================================

def get_equipment(equipment_id: str) -> dict:
    """
    Get equipment item by ID.

    Args:
        equipment_id: Equipment ID

    Returns:
        dict: Equipment item or None if not found
    """
    with read_snapshot() as conn:
        row = conn.execute('SELECT * FROM equipment WHERE id = ?', (equipment_id,)).fetchone()
    return _row_to_equipment(row)


def require_equipment(equipment_id: str) -> dict:
    """Get equipment item by ID or raise NotFoundError."""
    item = get_equipment(equipment_id)
    if item is None:
        raise NotFoundError('equipment', equipment_id)
    return item


def get_all_equipment(category: str = None, rentable_only: bool = False) -> list:
    """
    List catalog items ordered by category and name.

    Args:
        category: Filter by category
        rentable_only: Only rentable items

    Returns:
        list: Equipment dicts
    """
    query = 'SELECT * FROM equipment WHERE 1=1'
    params = []

    if category:
        query += ' AND category = ?'
        params.append(category)

    if rentable_only:
        query += ' AND rentable = 1'

    query += ' ORDER BY category, name'

    with read_snapshot() as conn:
        rows = conn.execute(query, params).fetchall()
    return [_row_to_equipment(row) for row in rows]


# =============================================================================
# CATALOG MANAGEMENT
# =============================================================================

def create_equipment(
    name: str,
    category: str,
    quantity_in_stock: int = 0,
    rentable: bool = True,
    daily_rent_rate=0,
    sku: str = None
) -> dict:
    """
    Add an item to the catalog.

    Args:
        name: Display name (e.g. 'Dive Tank')
        category: Category (e.g. 'Tank')
        quantity_in_stock: Total units owned
        rentable: Whether units may be reserved
        daily_rent_rate: Non-negative decimal
        sku: Optional unique stock keeping unit

    Returns:
        dict: Created equipment item

    Raises:
        ValidationError: If a field is invalid or the SKU is taken
    """
    name = validate_required_text(name, 'name')
    category = validate_required_text(category, 'category')
    stock = validate_stock(quantity_in_stock)
    rate = validate_rate(daily_rent_rate)
    equipment_id = str(uuid.uuid4())

    with transaction() as conn:
        if sku:
            taken = conn.execute('SELECT id FROM equipment WHERE sku = ?', (sku,)).fetchone()
            if taken:
                raise ValidationError(f"SKU {sku} is already in use", 'sku')

        conn.execute('''
            INSERT INTO equipment (id, name, category, sku, quantity_in_stock, rentable, daily_rent_rate)
            VALUES (?, ?, ?, ?, ?, ?, ?)
        ''', (equipment_id, name, category, sku or None, stock, 1 if rentable else 0, rate))

    item = get_equipment(equipment_id)
    log_audit('CREATE', 'equipment', equipment_id, after=item)
    return item


def update_equipment(
    equipment_id: str,
    quantity_in_stock: int = None,
    rentable: bool = None,
    daily_rent_rate=None,
    name: str = None,
    category: str = None,
    timeout: float = None
) -> dict:
    """
    Update catalog fields of an equipment item.

    Stock changes run under the equipment's resource lock and may not drop
    below the quantity currently held by active rental assignments.

    Args:
        equipment_id: Equipment ID
        quantity_in_stock: New total stock
        rentable: New rentable flag
        daily_rent_rate: New daily rate
        name: New name
        category: New category
        timeout: Lock and database wait override in seconds

    Returns:
        dict: Updated equipment item

    Raises:
        ValidationError: If a field is invalid or stock would drop below allocation
        NotFoundError: If the item does not exist
    """
    updates = {}
    if quantity_in_stock is not None:
        updates['quantity_in_stock'] = validate_stock(quantity_in_stock)
    if rentable is not None:
        updates['rentable'] = 1 if rentable else 0
    if daily_rent_rate is not None:
        updates['daily_rent_rate'] = validate_rate(daily_rent_rate)
    if name is not None:
        updates['name'] = validate_required_text(name, 'name')
    if category is not None:
        updates['category'] = validate_required_text(category, 'category')

    before = require_equipment(equipment_id)
    if not updates:
        return before

    assignments = ', '.join(f'{column} = ?' for column in updates)
    params = list(updates.values()) + [equipment_id]

    with resource_locks.hold(resource_key('equipment', equipment_id), timeout):
        with transaction(busy_timeout=timeout) as conn:
            if 'quantity_in_stock' in updates:
                allocated = conn.execute('''
                    SELECT COALESCE(SUM(quantity), 0) FROM rental_assignments
                    WHERE equipment_id = ? AND status = 'active'
                ''', (equipment_id,)).fetchone()[0]
                if updates['quantity_in_stock'] < allocated:
                    raise ValidationError(
                        f"quantity_in_stock cannot be lower than the {allocated} "
                        f"units currently rented out",
                        'quantity_in_stock'
                    )

            conn.execute(
                f'UPDATE equipment SET {assignments}, updated_at = CURRENT_TIMESTAMP WHERE id = ?',
                params
            )

    after = get_equipment(equipment_id)
    log_audit('UPDATE', 'equipment', equipment_id, before=before, after=after)
    logger.info(f"Equipment {equipment_id} updated: {sorted(updates)}")
    return after
