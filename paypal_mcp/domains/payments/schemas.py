"""
JSON input schemas advertised for PayPal tools

These are published through tools/list for the caller's benefit. Enforcement
happens in validators.py.
"""

from .validators import MAX_PAGE_SIZE, ORDER_INTENTS, PRODUCT_TYPES

STRING = {'type': 'string'}
NUMBER = {'type': 'number'}


def _money(currency_key: str, amount_key: str) -> dict:
    return {
        'type': 'object',
        'properties': {
            currency_key: STRING,
            amount_key: STRING
        },
        'required': [currency_key, amount_key]
    }


PAYMENT_TOKEN_SCHEMA = {
    'type': 'object',
    'properties': {
        'customer': {
            'type': 'object',
            'properties': {
                'id': STRING,
                'email_address': STRING
            },
            'required': ['id']
        },
        'payment_source': {
            'type': 'object',
            'properties': {
                'card': {
                    'type': 'object',
                    'properties': {
                        'name': STRING,
                        'number': STRING,
                        'expiry': STRING,
                        'security_code': STRING
                    }
                },
                'paypal': {
                    'type': 'object',
                    'properties': {
                        'email_address': STRING,
                        'account_id': STRING
                    }
                }
            }
        }
    },
    'required': ['customer', 'payment_source']
}

PAYMENT_SCHEMA = {
    'type': 'object',
    'properties': {
        'intent': STRING,
        'payer': {
            'type': 'object',
            'properties': {
                'payment_method': STRING,
                'funding_instruments': {
                    'type': 'array',
                    'items': {
                        'type': 'object',
                        'properties': {
                            'credit_card': {
                                'type': 'object',
                                'properties': {
                                    'number': STRING,
                                    'type': STRING,
                                    'expire_month': NUMBER,
                                    'expire_year': NUMBER,
                                    'cvv2': STRING,
                                    'first_name': STRING,
                                    'last_name': STRING
                                }
                            }
                        }
                    }
                }
            },
            'required': ['payment_method']
        },
        'transactions': {
            'type': 'array',
            'items': {
                'type': 'object',
                'properties': {
                    'amount': _money('currency', 'total'),
                    'description': STRING
                },
                'required': ['amount']
            }
        }
    },
    'required': ['intent', 'payer', 'transactions']
}

PAYOUT_SCHEMA = {
    'type': 'object',
    'properties': {
        'sender_batch_header': {
            'type': 'object',
            'properties': {
                'sender_batch_id': STRING,
                'email_subject': STRING,
                'recipient_type': STRING
            },
            'required': ['sender_batch_id']
        },
        'items': {
            'type': 'array',
            'items': {
                'type': 'object',
                'properties': {
                    'recipient_type': STRING,
                    'amount': _money('currency', 'value'),
                    'receiver': STRING,
                    'note': STRING,
                    'sender_item_id': STRING
                },
                'required': ['recipient_type', 'amount', 'receiver']
            }
        }
    },
    'required': ['sender_batch_header', 'items']
}

REFERENCED_PAYOUT_SCHEMA = {
    'type': 'object',
    'properties': {
        'referenced_payouts': {
            'type': 'array',
            'items': {
                'type': 'object',
                'properties': {
                    'item_id': STRING,
                    'processing_state': {
                        'type': 'object',
                        'properties': {
                            'status': STRING,
                            'reason': STRING
                        }
                    },
                    'reference_id': STRING,
                    'reference_type': STRING,
                    'payout_amount': _money('currency_code', 'value'),
                    'payout_destination': STRING
                },
                'required': ['reference_id', 'reference_type', 'payout_amount', 'payout_destination']
            }
        }
    },
    'required': ['referenced_payouts']
}

ORDER_SCHEMA = {
    'type': 'object',
    'properties': {
        'intent': {
            'type': 'string',
            'enum': list(ORDER_INTENTS)
        },
        'purchase_units': {
            'type': 'array',
            'items': {
                'type': 'object',
                'properties': {
                    'amount': _money('currency_code', 'value'),
                    'description': STRING,
                    'reference_id': STRING
                },
                'required': ['amount']
            }
        }
    },
    'required': ['intent', 'purchase_units']
}

PARTNER_REFERRAL_SCHEMA = {
    'type': 'object',
    'properties': {
        'individual_owners': {
            'type': 'array',
            'items': {
                'type': 'object',
                'properties': {
                    'names': {
                        'type': 'array',
                        'items': {
                            'type': 'object',
                            'properties': {
                                'prefix': STRING,
                                'given_name': STRING,
                                'middle_name': STRING,
                                'surname': STRING,
                                'suffix': STRING
                            },
                            'required': ['given_name', 'surname']
                        }
                    },
                    'citizenship': STRING,
                    'addresses': {
                        'type': 'array',
                        'items': {
                            'type': 'object',
                            'properties': {
                                'address_line_1': STRING,
                                'address_line_2': STRING,
                                'admin_area_2': STRING,
                                'admin_area_1': STRING,
                                'postal_code': STRING,
                                'country_code': STRING
                            },
                            'required': ['address_line_1', 'admin_area_2', 'admin_area_1',
                                         'postal_code', 'country_code']
                        }
                    }
                },
                'required': ['names']
            }
        },
        'business_entity': {
            'type': 'object',
            'properties': {
                'business_type': {
                    'type': 'object',
                    'properties': {
                        'type': STRING,
                        'subtype': STRING
                    },
                    'required': ['type']
                },
                'business_name': STRING,
                'business_phone': {
                    'type': 'object',
                    'properties': {
                        'country_code': STRING,
                        'national_number': STRING
                    }
                }
            },
            'required': ['business_type', 'business_name']
        },
        'email': STRING
    },
    'required': ['individual_owners', 'business_entity', 'email']
}

WEB_PROFILE_SCHEMA = {
    'type': 'object',
    'properties': {
        'name': STRING,
        'presentation': {
            'type': 'object',
            'properties': {
                'brand_name': STRING,
                'logo_image': STRING,
                'locale_code': STRING
            }
        },
        'input_fields': {
            'type': 'object',
            'properties': {
                'no_shipping': NUMBER,
                'address_override': NUMBER
            }
        },
        'flow_config': {
            'type': 'object',
            'properties': {
                'landing_page_type': STRING,
                'bank_txn_pending_url': STRING
            }
        }
    },
    'required': ['name']
}

PRODUCT_SCHEMA = {
    'type': 'object',
    'properties': {
        'name': STRING,
        'description': STRING,
        'type': {
            'type': 'string',
            'enum': list(PRODUCT_TYPES)
        },
        'category': STRING,
        'image_url': STRING,
        'home_url': STRING
    },
    'required': ['name', 'description', 'type', 'category']
}

PAGINATION_SCHEMA = {
    'type': 'object',
    'properties': {
        'page_size': {'type': 'number', 'minimum': 1, 'maximum': MAX_PAGE_SIZE},
        'page': {'type': 'number', 'minimum': 1}
    }
}

DISPUTE_SCHEMA = {
    'type': 'object',
    'properties': {
        'dispute_id': STRING
    },
    'required': ['dispute_id']
}

USERINFO_SCHEMA = {
    'type': 'object',
    'properties': {
        'access_token': STRING
    },
    'required': ['access_token']
}

INVOICE_SCHEMA = {
    'type': 'object',
    'properties': {
        'detail': {
            'type': 'object',
            'properties': {
                'invoice_number': STRING,
                'reference': STRING,
                'currency_code': STRING
            },
            'required': ['invoice_number', 'reference', 'currency_code']
        },
        'primary_recipients': {
            'type': 'array',
            'description': 'Only the first recipient is used',
            'items': {
                'type': 'object',
                'properties': {
                    'billing_info': {
                        'type': 'object',
                        'properties': {
                            'email_address': STRING
                        },
                        'required': ['email_address']
                    }
                },
                'required': ['billing_info']
            }
        },
        'items': {
            'type': 'array',
            'items': {
                'type': 'object',
                'properties': {
                    'name': STRING,
                    'quantity': STRING,
                    'unit_amount': _money('currency_code', 'value')
                },
                'required': ['name', 'quantity', 'unit_amount']
            }
        }
    },
    'required': ['detail', 'primary_recipients', 'items']
}
