# Relations of the bookkeeping schema: owner table -> embedded table -> foreign key.
# belongs_to: the key lives on the owner row; has_many: it lives on the embedded rows.
BOOKKEEPING_RELATIONS = {
    "invoices": {
        "customers": {"fk": "customer_id", "type": "belongs_to"},
        "invoice_items": {"fk": "invoice_id", "type": "has_many"},
    },
    "bills": {
        "vendors": {"fk": "vendor_id", "type": "belongs_to"},
        "bill_items": {"fk": "bill_id", "type": "has_many"},
    },
    "vendors": {
        "bills": {"fk": "vendor_id", "type": "has_many"},
    },
    "payments_received": {
        "invoices": {"fk": "invoice_id", "type": "belongs_to"},
        "customers": {"fk": "customer_id", "type": "belongs_to"},
    },
    "payments_made": {
        "bills": {"fk": "bill_id", "type": "belongs_to"},
        "vendors": {"fk": "vendor_id", "type": "belongs_to"},
    },
    "expenses": {
        "categories": {"fk": "category_id", "type": "belongs_to"},
        "jobs": {"fk": "job_id", "type": "belongs_to"},
    },
    "merchant_rules": {
        "categories": {"fk": "category_id", "type": "belongs_to"},
    },
    "item_category_rules": {
        "categories": {"fk": "category_id", "type": "belongs_to"},
    },
    "recurring_expenses": {
        "categories": {"fk": "category_id", "type": "belongs_to"},
    },
    "products_services": {
        "categories": {"fk": "category_id", "type": "belongs_to"},
    },
}
