"""Inventory blueprint - catalog, liquid stock summary and deliveries."""
from flask import Blueprint, request, jsonify, current_app
from decimal import Decimal

from kegpos.database import get_session
from kegpos.models import Product, SaleType
from kegpos.services import stock_service
from kegpos.exceptions import BusinessLogicError
from kegpos.utils.number_format import parse_amount

inventory_bp = Blueprint('inventory', __name__, url_prefix='/inventory')


def _keg_capacity() -> Decimal:
    return Decimal(str(current_app.config.get('KEG_CAPACITY_LITERS', '25')))


@inventory_bp.route('/products', methods=['GET'])
def list_products():
    """
    Active products, optionally for one catalog (?sale_type=retail|wholesale).

    Each product carries how many units the liquid pool could still fill.
    """
    db_session = get_session()
    sale_type = (request.args.get('sale_type') or '').strip().lower()

    query = db_session.query(Product).filter(Product.active == True)  # noqa: E712
    if sale_type:
        if sale_type not in (SaleType.RETAIL.value, SaleType.WHOLESALE.value):
            raise BusinessLogicError(f'Invalid sale type: {sale_type}')
        query = query.filter(Product.sale_type == sale_type)
    products = query.order_by(Product.unit_size_kegs, Product.name).all()

    total_liters = stock_service.get_total_available_liters(db_session)
    keg_capacity = _keg_capacity()

    items = []
    for product in products:
        availability = stock_service.check_stock_availability(
            product.unit_size_kegs, total_liters, [], keg_capacity
        )
        data = product.to_dict()
        data['is_available'] = availability.is_available and bool(product.stock)
        data['max_fillable_units'] = availability.max_addable_units
        items.append(data)

    return jsonify({'status': 'ok', 'products': items, 'total_available_liters': str(total_liters)})


@inventory_bp.route('/summary', methods=['GET'])
def stock_summary():
    """Liters pool broken down into drums and kegs, with low/medium/high levels."""
    db_session = get_session()
    config = current_app.config

    summary = stock_service.build_stock_summary(
        stock_service.get_total_available_liters(db_session),
        keg_capacity_liters=_keg_capacity(),
        kegs_per_drum=config.get('KEGS_PER_DRUM', 9),
        thresholds={
            'liters': config.get('STOCK_THRESHOLDS_LITERS', stock_service.DEFAULT_THRESHOLDS['liters']),
            'drums': config.get('STOCK_THRESHOLDS_DRUMS', stock_service.DEFAULT_THRESHOLDS['drums']),
            'kegs': config.get('STOCK_THRESHOLDS_KEGS', stock_service.DEFAULT_THRESHOLDS['kegs']),
        }
    )
    summary['total_available_liters'] = str(summary['total_available_liters'])
    summary['remaining_liters'] = str(summary['remaining_liters'])
    return jsonify({'status': 'ok', 'summary': summary})


@inventory_bp.route('/deliveries', methods=['POST'])
def create_delivery():
    """Register liquid received from a supplier: {"liters": ..., "supplier": ...}."""
    db_session = get_session()
    payload = request.get_json(silent=True) if request.is_json else request.form.to_dict()
    payload = payload or {}

    try:
        liters = parse_amount(payload.get('liters'), 'liters')
    except ValueError as e:
        raise BusinessLogicError(str(e))

    delivery = stock_service.record_delivery(db_session, liters, payload.get('supplier'))
    current_app.logger.info(f"Delivery {delivery.id} registered: {delivery.liters} L")
    return jsonify({'status': 'ok', 'delivery': delivery.to_dict()}), 201
