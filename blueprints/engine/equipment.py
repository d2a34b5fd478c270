"""
Equipment catalog API endpoints.

Handles catalog management and availability queries:
- List and create equipment items
- Update stock, rentable flag and rate
- Availability per item and for the whole catalog
"""

from flask import request

from models.availability import get_availability_summary, get_equipment_availability
from models.equipment import create_equipment, get_all_equipment, require_equipment, update_equipment
from utils.api_response import api_success, get_json_payload
from utils.validators import validate_bool

UPDATABLE_FIELDS = ('quantity_in_stock', 'rentable', 'daily_rent_rate', 'name', 'category')


def _rentable_only_arg() -> bool:
    value = request.args.get('rentable')
    if value is None or value == '':
        return False
    return validate_bool(value, 'rentable')


def register_routes(bp):
    """Register equipment API routes on the blueprint."""

    @bp.route('/equipment', methods=['GET'])
    def equipment_list():
        """
        List catalog items.

        Query params:
            category: Filter by category (optional)
            rentable: Only rentable items when true (optional)
        """
        items = get_all_equipment(
            category=request.args.get('category') or None,
            rentable_only=_rentable_only_arg()
        )
        return api_success(data=items, count=len(items))

    @bp.route('/equipment', methods=['POST'])
    def equipment_create():
        """
        Add an item to the catalog.

        Request JSON:
        {
            "name": "Dive Tank",
            "category": "Tank",
            "quantity_in_stock": 5,
            "rentable": true,
            "daily_rent_rate": "12.50",
            "sku": "TANK-12L"
        }
        """
        data = get_json_payload()

        item = create_equipment(
            name=data.get('name'),
            category=data.get('category'),
            quantity_in_stock=data.get('quantity_in_stock', 0),
            rentable=validate_bool(data.get('rentable', True), 'rentable'),
            daily_rent_rate=data.get('daily_rent_rate'),
            sku=data.get('sku')
        )
        return api_success(data=item, message='Equipment created', status=201)

    @bp.route('/equipment/<equipment_id>', methods=['GET'])
    def equipment_detail(equipment_id):
        """Get one catalog item."""
        return api_success(data=require_equipment(equipment_id))

    @bp.route('/equipment/<equipment_id>', methods=['PATCH'])
    def equipment_update(equipment_id):
        """
        Update catalog fields.

        Request JSON (all optional):
        {
            "quantity_in_stock": 6,
            "rentable": false,
            "daily_rent_rate": "14",
            "name": "...",
            "category": "..."
        }
        """
        data = get_json_payload()
        fields = {key: data[key] for key in UPDATABLE_FIELDS if key in data}
        if 'rentable' in fields:
            fields['rentable'] = validate_bool(fields['rentable'], 'rentable')

        item = update_equipment(equipment_id, **fields)
        return api_success(data=item, message='Equipment updated')

    @bp.route('/equipment/<equipment_id>/availability', methods=['GET'])
    def equipment_availability(equipment_id):
        """
        Availability ledger entry for one item.

        Response JSON:
        {
            "success": true,
            "data": {"equipment_id": "...", "quantity_in_stock": 5,
                     "allocated": 3, "available": 2, ...}
        }
        """
        return api_success(data=get_equipment_availability(equipment_id))

    @bp.route('/availability', methods=['GET'])
    def availability_summary():
        """
        Availability for the whole catalog.

        Query params:
            category: Filter by category (optional)
            rentable: Only rentable items when true (optional)
        """
        entries = get_availability_summary(
            category=request.args.get('category') or None,
            rentable_only=_rentable_only_arg()
        )
        return api_success(data=entries, count=len(entries))
