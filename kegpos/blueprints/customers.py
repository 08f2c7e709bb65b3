"""Customers blueprint - accounts, history and debt payments."""
from flask import Blueprint, request, jsonify, current_app

from kegpos.database import get_session
from kegpos.models import CustomerTransaction, PaymentMethod
from kegpos.services import customer_service, sales_service
from kegpos.exceptions import BusinessLogicError
from kegpos.utils.number_format import parse_amount

customers_bp = Blueprint('customers', __name__, url_prefix='/customers')


@customers_bp.route('/', methods=['GET'])
def list_customers():
    """Customers with their balance; ?customer_type= and ?with_debt=1 filter the list."""
    db_session = get_session()
    customer_type = (request.args.get('customer_type') or '').strip().lower() or None
    with_debt = request.args.get('with_debt', '').lower() in ('1', 'true', 'yes')

    customers = customer_service.list_customers(db_session, customer_type=customer_type, with_debt=with_debt)
    return jsonify({
        'status': 'ok',
        'customers': [customer_service.customer_summary(c) for c in customers],
    })


@customers_bp.route('/<int:customer_id>', methods=['GET'])
def customer_detail(customer_id: int):
    db_session = get_session()
    customer = customer_service.get_customer(db_session, customer_id)

    transactions = (
        db_session.query(CustomerTransaction)
        .filter(CustomerTransaction.customer_id == customer.id)
        .order_by(CustomerTransaction.id.desc())
        .limit(50)
        .all()
    )
    sales = sales_service.list_sales(db_session, customer_id=customer.id, limit=20)

    return jsonify({
        'status': 'ok',
        'customer': customer_service.customer_summary(customer),
        'transactions': [t.to_dict() for t in transactions],
        'sales': [s.to_dict() for s in sales],
    })


@customers_bp.route('/<int:customer_id>/payments', methods=['POST'])
def register_payment(customer_id: int):
    """Money received on account: {"amount": ..., "payment_method": "cash"|"transfer"}."""
    db_session = get_session()
    payload = request.get_json(silent=True) if request.is_json else request.form.to_dict()
    payload = payload or {}

    try:
        amount = parse_amount(payload.get('amount'), 'amount')
    except ValueError as e:
        raise BusinessLogicError(str(e))

    method = (payload.get('payment_method') or PaymentMethod.CASH.value).strip().lower()
    entry = customer_service.record_payment(
        db_session, customer_id, amount, payment_method=method, notes=payload.get('notes')
    )
    customer = customer_service.get_customer(db_session, customer_id)

    current_app.logger.info(f"Account payment {entry.id} for customer {customer_id}")
    return jsonify({
        'status': 'ok',
        'transaction': entry.to_dict(),
        'customer': customer_service.customer_summary(customer),
    }), 201
