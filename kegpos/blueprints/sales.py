"""Sales blueprint - terminal draft and settlement (JSON)."""
from flask import Blueprint, request, session, jsonify, current_app, Response
from decimal import Decimal
from functools import partial
from typing import Any, Dict, Optional, Tuple

from kegpos.database import get_session
from kegpos.models import CustomerStatus, Product, SaleDraft
from kegpos.services import sale_draft_service, sales_service, settlement_service
from kegpos.services.customer_service import get_customer, get_customer_account
from kegpos.services.pricing_service import calculate_totals
from kegpos.services.stock_service import check_stock_availability, cart_liters, get_total_available_liters
from kegpos.blueprints.metrics import record_settlement_metrics, settlements_blocked_total
from kegpos.exceptions import BusinessLogicError, NotFoundError, SettlementBlockedError
from kegpos.utils.number_format import parse_amount, parse_quantity

sales_bp = Blueprint('sales', __name__, url_prefix='/sales')

DRAFT_SESSION_KEY = 'sale_draft'


# ============================================================================
# HELPERS
# ============================================================================

def _keg_capacity() -> Decimal:
    return Decimal(str(current_app.config.get('KEG_CAPACITY_LITERS', '25')))


def _payload() -> Dict[str, Any]:
    if request.is_json:
        return request.get_json(silent=True) or {}
    return request.form.to_dict()


def _parse(parser, value, field):
    """Run a number parser, turning bad input into a 400."""
    try:
        return parser(value, field)
    except ValueError as e:
        raise BusinessLogicError(str(e))


def _product_id(payload) -> int:
    if not payload.get('product_id'):
        raise BusinessLogicError('Missing product_id')
    try:
        return int(payload.get('product_id'))
    except (ValueError, TypeError):
        raise BusinessLogicError('Invalid product_id')


def _load_draft(db_session) -> SaleDraft:
    """Rebuild the operator's draft from the session, with fresh product rows."""
    data = session.get(DRAFT_SESSION_KEY) or {}
    product_ids = [product_id for product_id, _ in data.get('lines', [])]

    products_by_id = {}
    if product_ids:
        products = db_session.query(Product).filter(Product.id.in_(product_ids)).all()
        products_by_id = {p.id: p for p in products}

    return SaleDraft.from_dict(
        data, products_by_id, current_app.config.get('DEFAULT_SALE_TYPE', 'retail')
    )


def _save_draft(draft: SaleDraft) -> None:
    session[DRAFT_SESSION_KEY] = draft.to_dict()
    session.modified = True


def _draft_view(db_session, draft: SaleDraft) -> Dict[str, Any]:
    """Everything the terminal renders for the current draft."""
    keg_capacity = _keg_capacity()
    total_liters = get_total_available_liters(db_session)
    account = get_customer_account(db_session, draft.customer_id)
    totals = calculate_totals(draft.cart, draft.discount)
    preview = settlement_service.build_settlement(draft, account, keg_capacity)
    state = settlement_service.evaluate_settlement_state(draft, account)

    lines = []
    for line, detail in zip(draft.cart, totals.lines):
        availability = check_stock_availability(
            line.product.unit_size_kegs, total_liters, draft.cart, keg_capacity
        )
        lines.append({
            'product_id': detail['product_id'],
            'product_name': detail['product_name'],
            'unit_size_kegs': detail['unit_size_kegs'],
            'qty': detail['qty'],
            'unit_price': str(detail['unit_price']),
            'line_total': str(detail['line_total']),
            'max_addable_units': availability.max_addable_units,
        })

    consumed = cart_liters(draft.cart, keg_capacity)
    return {
        'lines': lines,
        'discount': {'type': draft.discount.type, 'value': str(draft.discount.value)},
        'payment_method': draft.payment_method,
        'tendered_amount': str(draft.tendered_amount),
        'customer_id': draft.customer_id,
        'sale_type': draft.sale_type,
        'cart_liters': str(consumed),
        'total_available_liters': str(total_liters),
        'remaining_liters': str(max(Decimal('0'), total_liters - consumed)),
        'settlement': preview.to_dict(),
        'state': state.value,
    }


def _draft_response(db_session, draft: SaleDraft, **extra) -> Tuple[Response, int]:
    _save_draft(draft)
    body = {'status': 'ok', 'draft': _draft_view(db_session, draft)}
    body.update(extra)
    return jsonify(body), 200


# ============================================================================
# DRAFT ENDPOINTS
# ============================================================================

@sales_bp.route('/draft', methods=['GET'])
def draft_show():
    """Current draft with totals, liters left and settlement preview."""
    db_session = get_session()
    draft = _load_draft(db_session)
    return _draft_response(db_session, draft)


@sales_bp.route('/draft/add', methods=['POST'])
def draft_add():
    """Add one unit of a product; ignored when it does not fit in the tank."""
    db_session = get_session()
    payload = _payload()
    product_id = _product_id(payload)

    product = db_session.query(Product).filter(Product.id == product_id).first()
    if not product:
        raise NotFoundError('Product not found')
    if not product.active:
        raise BusinessLogicError(f'The product "{product.name}" is not active')

    draft = _load_draft(db_session)
    added = sale_draft_service.add_unit(
        draft, product, get_total_available_liters(db_session), _keg_capacity()
    )
    if not added:
        current_app.logger.info(f"Unit of product {product_id} not added: no liquid stock left for it")
    return _draft_response(db_session, draft, added=added)


@sales_bp.route('/draft/quantity', methods=['POST'])
def draft_quantity():
    """Set a line quantity (0 removes it)."""
    db_session = get_session()
    payload = _payload()
    product_id = _product_id(payload)
    quantity = _parse(parse_quantity, payload.get('quantity'), 'quantity')

    draft = _load_draft(db_session)
    updated = sale_draft_service.set_quantity(
        draft, product_id, quantity, get_total_available_liters(db_session), _keg_capacity()
    )
    return _draft_response(db_session, draft, updated=updated)


@sales_bp.route('/draft/remove', methods=['POST'])
def draft_remove():
    db_session = get_session()
    product_id = _product_id(_payload())

    draft = _load_draft(db_session)
    removed = sale_draft_service.remove_line(draft, product_id)
    return _draft_response(db_session, draft, removed=removed)


@sales_bp.route('/draft/discount', methods=['POST'])
def draft_discount():
    """Set the whole-cart discount: {"type": "amount"|"percentage", "value": ...}."""
    db_session = get_session()
    payload = _payload()
    value = _parse(parse_amount, payload.get('value'), 'discount')

    draft = _load_draft(db_session)
    sale_draft_service.set_discount(draft, payload.get('type'), value)
    return _draft_response(db_session, draft)


@sales_bp.route('/draft/payment', methods=['POST'])
def draft_payment():
    db_session = get_session()
    payload = _payload()

    draft = _load_draft(db_session)
    sale_draft_service.set_payment_method(draft, payload.get('payment_method'))
    return _draft_response(db_session, draft)


@sales_bp.route('/draft/tendered', methods=['POST'])
def draft_tendered():
    db_session = get_session()
    amount = _parse(parse_amount, _payload().get('amount'), 'tendered amount')

    draft = _load_draft(db_session)
    sale_draft_service.set_tendered_amount(draft, amount)
    return _draft_response(db_session, draft)


@sales_bp.route('/draft/customer', methods=['POST'])
def draft_customer():
    """Select the customer of the sale ({"customer_id": null} clears it)."""
    db_session = get_session()
    customer_id = _payload().get('customer_id')

    account = None
    if customer_id not in (None, ''):
        try:
            customer = get_customer(db_session, int(customer_id))
        except (ValueError, TypeError):
            raise BusinessLogicError('Invalid customer_id')
        if customer.status == CustomerStatus.BLOCKED.value:
            raise BusinessLogicError(f'Customer "{customer.name}" is blocked')
        account = customer.to_account()

    draft = _load_draft(db_session)
    sale_draft_service.select_customer(draft, account)
    return _draft_response(db_session, draft)


@sales_bp.route('/draft/sale-type', methods=['POST'])
def draft_sale_type():
    db_session = get_session()
    sale_type = _payload().get('sale_type')

    draft = _load_draft(db_session)
    sale_draft_service.set_sale_type(draft, sale_type)
    return _draft_response(db_session, draft)


@sales_bp.route('/draft/clear', methods=['POST'])
def draft_clear():
    db_session = get_session()
    draft = _load_draft(db_session)
    sale_draft_service.clear_draft(draft)
    return _draft_response(db_session, draft)


# ============================================================================
# SETTLEMENT
# ============================================================================

@sales_bp.route('/settle', methods=['POST'])
def settle():
    """
    Settle the current draft.

    On success the sale is recorded, the draft is reset and the settlement
    is returned. On any failure the draft stays as it was.
    """
    db_session = get_session()
    keg_capacity = _keg_capacity()
    draft = _load_draft(db_session)
    account = get_customer_account(db_session, draft.customer_id)

    persist = partial(sales_service.record_settlement, db_session, keg_capacity_liters=keg_capacity)
    try:
        result = settlement_service.settle(draft, account, persist, keg_capacity)
    except SettlementBlockedError as e:
        settlements_blocked_total.labels(state=e.state or 'unknown').inc()
        raise

    record_settlement_metrics(result)
    _save_draft(draft)
    current_app.logger.info(f"Sale {result.sale_id} settled from terminal")

    return jsonify({
        'status': 'ok',
        'settlement': result.to_dict(),
        'draft': _draft_view(db_session, draft),
    }), 201


# ============================================================================
# HISTORY
# ============================================================================

@sales_bp.route('/', methods=['GET'])
def list_sales():
    db_session = get_session()
    customer_id: Optional[int] = request.args.get('customer_id', type=int)
    limit = min(request.args.get('limit', 50, type=int) or 50, 200)

    sales = sales_service.list_sales(db_session, customer_id=customer_id, limit=limit)
    return jsonify({'status': 'ok', 'sales': [s.to_dict() for s in sales]})


@sales_bp.route('/<int:sale_id>', methods=['GET'])
def sale_detail(sale_id: int):
    db_session = get_session()
    sale = sales_service.get_sale(db_session, sale_id)
    return jsonify({'status': 'ok', 'sale': sale.to_dict(include_lines=True)})
