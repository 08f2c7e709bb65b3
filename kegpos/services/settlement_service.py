"""
Settlement service - decides when a draft may be settled and settles it.

States of a draft::

    NO_CUSTOMER -> CUSTOMER_SELECTED -> READY_TO_SETTLE
                                     -> PAYMENT_PENDING

A non-empty cash / transfer draft with nothing tendered is PAYMENT_PENDING
whatever else is set, unless nothing is due and the customer holds no credit.
Only READY_TO_SETTLE drafts can be settled. The persistence collaborator is
called exactly once; the draft is reset only when it succeeds.
"""
from decimal import Decimal
from typing import Callable, Optional
import enum
import logging

from kegpos.exceptions import PosError, SettlementBlockedError, SettlementPersistenceError
from kegpos.models import CustomerAccount, SaleDraft, SettlementResult
from kegpos.services.pricing_service import calculate_totals
from kegpos.services.reconciliation_service import Reconciliation, reconcile
from kegpos.services.stock_service import cart_liters
from kegpos.utils.units import KEG_CAPACITY_LITERS

logger = logging.getLogger(__name__)

# persist(draft, result, account) -> sale id
PersistSettlement = Callable[[SaleDraft, SettlementResult, CustomerAccount], Optional[int]]


class SettlementState(str, enum.Enum):
    NO_CUSTOMER = 'no_customer'
    CUSTOMER_SELECTED = 'customer_selected'
    PAYMENT_PENDING = 'payment_pending'
    READY_TO_SETTLE = 'ready_to_settle'


BLOCKED_MESSAGES = {
    SettlementState.NO_CUSTOMER: 'Select a customer before completing the sale',
    SettlementState.CUSTOMER_SELECTED: 'The cart is empty. Add products before completing the sale',
    SettlementState.PAYMENT_PENDING: 'Enter the amount received before completing the sale',
}


def reconcile_draft(draft: SaleDraft, account: Optional[CustomerAccount]) -> Reconciliation:
    """Reconcile the draft total with the selected customer's balance (0 when none)."""
    totals = calculate_totals(draft.cart, draft.discount)
    balance = account.balance if account else Decimal('0')
    return reconcile(totals.total, balance, draft.payment_method, draft.tendered_amount)


def build_settlement(
    draft: SaleDraft,
    account: Optional[CustomerAccount],
    keg_capacity_liters=KEG_CAPACITY_LITERS
) -> SettlementResult:
    """Preview of the settlement for the draft as it stands."""
    totals = calculate_totals(draft.cart, draft.discount)
    balance = account.balance if account else Decimal('0')
    rec = reconcile(totals.total, balance, draft.payment_method, draft.tendered_amount)

    return SettlementResult(
        subtotal=totals.subtotal,
        discount_amount=totals.discount_amount,
        total=totals.total,
        previous_balance=rec.balance,
        amount_due_including_account=rec.amount_due_including_account,
        needs_payment=rec.needs_payment,
        change=rec.change,
        remaining_debt=rec.remaining_debt,
        new_balance=rec.new_balance,
        payment_method=rec.payment_method,
        tendered_amount=rec.tendered_amount,
        liters_consumed=cart_liters(draft.cart, keg_capacity_liters),
        payment_status=rec.payment_status,
    )


def evaluate_settlement_state(draft: SaleDraft, account: Optional[CustomerAccount]) -> SettlementState:
    """Current state of the draft; a missing tender outranks a missing customer."""
    if not draft.cart.is_empty and reconcile_draft(draft, account).payment_blocked:
        return SettlementState.PAYMENT_PENDING
    if account is None or draft.customer_id is None:
        return SettlementState.NO_CUSTOMER
    if draft.cart.is_empty:
        return SettlementState.CUSTOMER_SELECTED
    return SettlementState.READY_TO_SETTLE


def validate_settlement(
    draft: SaleDraft,
    account: Optional[CustomerAccount],
    keg_capacity_liters=KEG_CAPACITY_LITERS
) -> SettlementResult:
    """
    Raise SettlementBlockedError unless the draft can be settled.

    Reasons are reported in operator order: customer, cart, payment.
    """
    if account is None or draft.customer_id is None:
        state = SettlementState.NO_CUSTOMER
    elif draft.cart.is_empty:
        state = SettlementState.CUSTOMER_SELECTED
    else:
        state = evaluate_settlement_state(draft, account)

    if state != SettlementState.READY_TO_SETTLE:
        raise SettlementBlockedError(BLOCKED_MESSAGES[state], state=state.value)

    return build_settlement(draft, account, keg_capacity_liters)


def settle(
    draft: SaleDraft,
    account: Optional[CustomerAccount],
    persist: PersistSettlement,
    keg_capacity_liters=KEG_CAPACITY_LITERS
) -> SettlementResult:
    """
    Settle the draft.

    Validates, hands the result to ``persist`` (stock decrement, balance
    update) and resets the draft only if that succeeds. On failure the draft
    is left exactly as it was.
    """
    result = validate_settlement(draft, account, keg_capacity_liters)

    try:
        result.sale_id = persist(draft, result, account)
    except PosError:
        logger.warning(f"Settlement for customer {draft.customer_id} rejected by persistence")
        raise
    except Exception as e:
        logger.error(f"Settlement for customer {draft.customer_id} failed: {e}", exc_info=True)
        raise SettlementPersistenceError(str(e))

    draft.reset()
    logger.info(
        f"Sale {result.sale_id} settled: total={result.total} method={result.payment_method} "
        f"balance {result.previous_balance} -> {result.new_balance}"
    )
    return result
