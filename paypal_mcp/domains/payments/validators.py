"""
Input validators for PayPal tools

Each validator takes the raw ``arguments`` of a tool call and returns a newly
built payload holding only recognized fields. Required fields that are missing
or mistyped raise InvalidParamsError; optional fields of the wrong type are
dropped. Unknown fields never reach PayPal.
"""

import math
from typing import Any, Callable, Dict, Iterable, List

from ...errors import InvalidParamsError

ORDER_INTENTS = ('CAPTURE', 'AUTHORIZE')
PRODUCT_TYPES = ('PHYSICAL', 'DIGITAL', 'SERVICE')

MAX_PAGE_SIZE = 100


def _is_string(value: Any) -> bool:
    return isinstance(value, str)


def _is_number(value: Any) -> bool:
    # bool is an int subclass but not a JSON number; NaN and infinities are not JSON either
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def _is_object(value: Any) -> bool:
    return isinstance(value, dict)


def _is_non_empty_list(value: Any) -> bool:
    return isinstance(value, list) and len(value) > 0


def _require_object(value: Any, message: str) -> Dict[str, Any]:
    if not _is_object(value):
        raise InvalidParamsError(message)
    return value


def _all_strings(source: Dict[str, Any], keys: Iterable[str]) -> bool:
    return all(_is_string(source.get(key)) for key in keys)


def _copy_optional(source: Dict[str, Any], target: Dict[str, Any], keys: Iterable[str],
                   check: Callable[[Any], bool] = _is_string) -> Dict[str, Any]:
    """Copy each key from source to target when present and of the right type"""
    for key in keys:
        if key in source and check(source[key]):
            target[key] = source[key]
    return target


def _validate_money(value: Any, currency_key: str, amount_key: str, message: str) -> Dict[str, str]:
    amount = _require_object(value, message)
    if not _all_strings(amount, (currency_key, amount_key)):
        raise InvalidParamsError(message)
    return {currency_key: amount[currency_key], amount_key: amount[amount_key]}


def validate_payment_token(args: Any) -> Dict[str, Any]:
    token = _require_object(args, 'Invalid payment token data')

    if not _is_object(token.get('customer')) or not _is_object(token.get('payment_source')):
        raise InvalidParamsError('Missing required payment token fields')

    customer = token['customer']
    if not _is_string(customer.get('id')):
        raise InvalidParamsError('Invalid customer ID')

    validated_customer = _copy_optional(customer, {'id': customer['id']}, ('email_address',))

    source = token['payment_source']
    payment_source: Dict[str, Any] = {}

    card = source.get('card')
    card_fields = ('name', 'number', 'expiry', 'security_code')
    if _is_object(card) and _all_strings(card, card_fields):
        payment_source['card'] = {key: card[key] for key in card_fields}

    paypal = source.get('paypal')
    if _is_object(paypal) and _is_string(paypal.get('email_address')):
        payment_source['paypal'] = _copy_optional(
            paypal, {'email_address': paypal['email_address']}, ('account_id',)
        )

    return {
        'customer': validated_customer,
        'payment_source': payment_source,
    }


def _validate_funding_instrument(instrument: Any) -> Dict[str, Any]:
    instrument = _require_object(instrument, 'Invalid funding instrument')
    validated: Dict[str, Any] = {}

    card = instrument.get('credit_card')
    string_fields = ('number', 'type', 'cvv2', 'first_name', 'last_name')
    number_fields = ('expire_month', 'expire_year')
    if (_is_object(card) and _all_strings(card, string_fields)
            and all(_is_number(card.get(key)) for key in number_fields)):
        validated['credit_card'] = {key: card[key] for key in string_fields + number_fields}

    return validated


def _validate_transaction(transaction: Any) -> Dict[str, Any]:
    transaction = _require_object(transaction, 'Invalid transaction')
    if not _is_object(transaction.get('amount')):
        raise InvalidParamsError('Invalid transaction amount')

    amount = _validate_money(transaction['amount'], 'total', 'currency', 'Invalid amount fields')
    return _copy_optional(transaction, {'amount': amount}, ('description',))


def validate_payment(args: Any) -> Dict[str, Any]:
    payment = _require_object(args, 'Invalid payment data')

    if (not _is_string(payment.get('intent'))
            or not _is_object(payment.get('payer'))
            or not _is_non_empty_list(payment.get('transactions'))):
        raise InvalidParamsError('Missing required payment fields')

    payer = payment['payer']
    if not _is_string(payer.get('payment_method')):
        raise InvalidParamsError('Invalid payment method')

    validated_payer: Dict[str, Any] = {'payment_method': payer['payment_method']}
    if isinstance(payer.get('funding_instruments'), list):
        instruments = [_validate_funding_instrument(i) for i in payer['funding_instruments']]
        # instruments with no usable funding source are not forwarded
        instruments = [instrument for instrument in instruments if instrument]
        if instruments:
            validated_payer['funding_instruments'] = instruments

    return {
        'intent': payment['intent'],
        'payer': validated_payer,
        'transactions': [_validate_transaction(t) for t in payment['transactions']],
    }


def _validate_payout_item(item: Any) -> Dict[str, Any]:
    item = _require_object(item, 'Invalid payout item')
    if (not _is_string(item.get('recipient_type'))
            or not _is_object(item.get('amount'))
            or not _is_string(item.get('receiver'))):
        raise InvalidParamsError('Invalid payout item')

    validated = {
        'recipient_type': item['recipient_type'],
        'amount': _validate_money(item['amount'], 'value', 'currency', 'Invalid amount fields'),
        'receiver': item['receiver'],
    }
    return _copy_optional(item, validated, ('note', 'sender_item_id'))


def validate_payout(args: Any) -> Dict[str, Any]:
    payout = _require_object(args, 'Invalid payout data')

    if not _is_object(payout.get('sender_batch_header')) or not _is_non_empty_list(payout.get('items')):
        raise InvalidParamsError('Missing required payout fields')

    header = payout['sender_batch_header']
    if not _is_string(header.get('sender_batch_id')):
        raise InvalidParamsError('Invalid sender batch ID')

    validated_header = _copy_optional(
        header, {'sender_batch_id': header['sender_batch_id']}, ('email_subject', 'recipient_type')
    )

    return {
        'sender_batch_header': validated_header,
        'items': [_validate_payout_item(item) for item in payout['items']],
    }


def _validate_referenced_payout_item(item: Any) -> Dict[str, Any]:
    item = _require_object(item, 'Invalid referenced payout')
    if (not _all_strings(item, ('reference_id', 'reference_type', 'payout_destination'))
            or not _is_object(item.get('payout_amount'))):
        raise InvalidParamsError('Invalid referenced payout')

    amount = _validate_money(item['payout_amount'], 'currency_code', 'value', 'Invalid amount fields')

    state = item.get('processing_state')
    processing_state = {'status': ''}
    if _is_object(state):
        if _is_string(state.get('status')):
            processing_state['status'] = state['status']
        _copy_optional(state, processing_state, ('reason',))

    return {
        'item_id': item['item_id'] if _is_string(item.get('item_id')) else '',
        'processing_state': processing_state,
        'reference_id': item['reference_id'],
        'reference_type': item['reference_type'],
        'payout_amount': amount,
        'payout_destination': item['payout_destination'],
    }


def validate_referenced_payout(args: Any) -> Dict[str, Any]:
    payout = _require_object(args, 'Invalid referenced payout data')

    if not _is_non_empty_list(payout.get('referenced_payouts')):
        raise InvalidParamsError('Missing referenced payouts')

    return {
        'referenced_payouts': [_validate_referenced_payout_item(r) for r in payout['referenced_payouts']],
    }


def _validate_purchase_unit(unit: Any) -> Dict[str, Any]:
    unit = _require_object(unit, 'Invalid purchase unit')
    if not _is_object(unit.get('amount')):
        raise InvalidParamsError('Invalid purchase unit amount')

    amount = _validate_money(unit['amount'], 'currency_code', 'value', 'Invalid amount fields')
    return _copy_optional(unit, {'amount': amount}, ('description', 'reference_id'))


def validate_order(args: Any) -> Dict[str, Any]:
    order = _require_object(args, 'Invalid order data')

    if order.get('intent') not in ORDER_INTENTS:
        raise InvalidParamsError(f"Invalid order intent, expected one of: {', '.join(ORDER_INTENTS)}")
    if not _is_non_empty_list(order.get('purchase_units')):
        raise InvalidParamsError('Missing required order fields')

    return {
        'intent': order['intent'],
        'purchase_units': [_validate_purchase_unit(unit) for unit in order['purchase_units']],
    }


def _validate_owner_name(name: Any) -> Dict[str, str]:
    name = _require_object(name, 'Invalid name fields')
    if not _all_strings(name, ('given_name', 'surname')):
        raise InvalidParamsError('Invalid name fields')

    validated = {'given_name': name['given_name'], 'surname': name['surname']}
    return _copy_optional(name, validated, ('prefix', 'middle_name', 'suffix'))


def _validate_owner_address(address: Any) -> Dict[str, str]:
    required = ('address_line_1', 'admin_area_2', 'admin_area_1', 'postal_code', 'country_code')
    address = _require_object(address, 'Invalid owner address')
    if not _all_strings(address, required):
        raise InvalidParamsError('Invalid owner address')

    validated = {key: address[key] for key in required}
    return _copy_optional(address, validated, ('address_line_2',))


def _validate_individual_owner(owner: Any) -> Dict[str, Any]:
    owner = _require_object(owner, 'Invalid owner names')
    if not _is_non_empty_list(owner.get('names')):
        raise InvalidParamsError('Invalid owner names')

    validated: Dict[str, Any] = {'names': [_validate_owner_name(n) for n in owner['names']]}
    _copy_optional(owner, validated, ('citizenship',))
    if isinstance(owner.get('addresses'), list):
        validated['addresses'] = [_validate_owner_address(a) for a in owner['addresses']]
    return validated


def _validate_business_entity(business: Any) -> Dict[str, Any]:
    business = _require_object(business, 'Invalid business entity')
    if not _is_object(business.get('business_type')) or not _is_string(business.get('business_name')):
        raise InvalidParamsError('Invalid business entity')

    business_type = business['business_type']
    if not _is_string(business_type.get('type')):
        raise InvalidParamsError('Invalid business type')

    validated: Dict[str, Any] = {
        'business_type': _copy_optional(business_type, {'type': business_type['type']}, ('subtype',)),
        'business_name': business['business_name'],
    }

    phone = business.get('business_phone')
    if _is_object(phone) and _all_strings(phone, ('country_code', 'national_number')):
        validated['business_phone'] = {
            'country_code': phone['country_code'],
            'national_number': phone['national_number'],
        }
    return validated


def validate_partner_referral(args: Any) -> Dict[str, Any]:
    referral = _require_object(args, 'Invalid partner referral data')

    if (not isinstance(referral.get('individual_owners'), list)
            or not referral.get('business_entity')
            or not _is_string(referral.get('email'))):
        raise InvalidParamsError('Missing required referral fields')

    individual_owners = [_validate_individual_owner(o) for o in referral['individual_owners']]

    return {
        'individual_owners': individual_owners,
        'business_entity': _validate_business_entity(referral['business_entity']),
        'email': referral['email'],
    }


def validate_web_profile(args: Any) -> Dict[str, Any]:
    profile = _require_object(args, 'Invalid web profile data')

    if not _is_string(profile.get('name')):
        raise InvalidParamsError('Missing required profile name')

    presentation: Dict[str, Any] = {}
    input_fields: Dict[str, Any] = {}
    flow_config: Dict[str, Any] = {}

    if _is_object(profile.get('presentation')):
        _copy_optional(profile['presentation'], presentation, ('brand_name', 'logo_image', 'locale_code'))
    if _is_object(profile.get('input_fields')):
        _copy_optional(profile['input_fields'], input_fields, ('no_shipping', 'address_override'),
                       check=_is_number)
    if _is_object(profile.get('flow_config')):
        _copy_optional(profile['flow_config'], flow_config, ('landing_page_type', 'bank_txn_pending_url'))

    return {
        'name': profile['name'],
        'presentation': presentation,
        'input_fields': input_fields,
        'flow_config': flow_config,
    }


def validate_product(args: Any) -> Dict[str, Any]:
    product = _require_object(args, 'Invalid product data')

    if not _all_strings(product, ('name', 'description', 'category')):
        raise InvalidParamsError('Missing required product fields')
    if product.get('type') not in PRODUCT_TYPES:
        raise InvalidParamsError(f"Invalid product type, expected one of: {', '.join(PRODUCT_TYPES)}")

    validated = {
        'name': product['name'],
        'description': product['description'],
        'type': product['type'],
        'category': product['category'],
    }
    return _copy_optional(product, validated, ('image_url', 'home_url'))


def validate_pagination_params(args: Any) -> Dict[str, Any]:
    """Soft validator: malformed input yields an empty result instead of an error"""
    if not _is_object(args):
        return {}

    validated: Dict[str, Any] = {}
    page_size = args.get('page_size')
    if _is_number(page_size) and 1 <= page_size <= MAX_PAGE_SIZE:
        validated['page_size'] = page_size
    page = args.get('page')
    if _is_number(page) and page >= 1:
        validated['page'] = page
    return validated


def validate_dispute_params(args: Any) -> Dict[str, str]:
    if not _is_object(args) or not _is_string(args.get('dispute_id')):
        raise InvalidParamsError('Invalid dispute ID')
    return {'dispute_id': args['dispute_id']}


def validate_token_params(args: Any) -> Dict[str, str]:
    if not _is_object(args) or not _is_string(args.get('access_token')):
        raise InvalidParamsError('Invalid access token')
    return {'access_token': args['access_token']}


def _validate_invoice_item(item: Any) -> Dict[str, Any]:
    item = _require_object(item, 'Invalid invoice item')
    if not _all_strings(item, ('name', 'quantity')) or not _is_object(item.get('unit_amount')):
        raise InvalidParamsError('Invalid invoice item')

    return {
        'name': item['name'],
        'quantity': item['quantity'],
        'unit_amount': _validate_money(item['unit_amount'], 'currency_code', 'value', 'Invalid item amount'),
    }


def validate_invoice(args: Any) -> Dict[str, Any]:
    invoice = _require_object(args, 'Invalid invoice data')

    if (not _is_object(invoice.get('detail'))
            or not _is_non_empty_list(invoice.get('primary_recipients'))
            or not _is_non_empty_list(invoice.get('items'))):
        raise InvalidParamsError('Missing required invoice fields')

    detail = invoice['detail']
    detail_fields = ('invoice_number', 'reference', 'currency_code')
    if not _all_strings(detail, detail_fields):
        raise InvalidParamsError('Invalid invoice detail fields')

    # only the first recipient is forwarded
    recipient = invoice['primary_recipients'][0]
    billing_info = recipient.get('billing_info') if _is_object(recipient) else None
    if not _is_object(billing_info) or not _is_string(billing_info.get('email_address')):
        raise InvalidParamsError('Invalid recipient information')

    items: List[Dict[str, Any]] = [_validate_invoice_item(item) for item in invoice['items']]

    return {
        'detail': {key: detail[key] for key in detail_fields},
        'primary_recipients': [{
            'billing_info': {'email_address': billing_info['email_address']},
        }],
        'items': items,
    }
