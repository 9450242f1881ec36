from decimal import Decimal

DECIMAL_QUANTIZE = Decimal("0.01")
ZERO = Decimal("0.00")

TIP_OPTIONS = [0, 15, 18, 20, 25]

# Wire field names of the split payload
FIELD_TOTAL = 'total'
FIELD_INDIVIDUALS = 'individuals'
FIELD_NAME = 'name'
FIELD_ITEMS = 'items'
FIELD_SUBTOTAL = 'subtotal'
FIELD_TAX_SHARE = 'taxShare'
FIELD_TIP_SHARE = 'tipShare'
FIELD_OWED = 'owed'
FIELD_PRICE = 'price'
FIELD_QUANTITY = 'quantity'
FIELD_CATEGORY = 'category'

PATTERNS = {
        'fence_open': r'^```(?:json|JSON)?\s*',
        'fence_close': r'\s*```$',
    }

CURRENCY_SYMBOLS = {
    'USD': '$',
    'EUR': '€',
    'GBP': '£',
    'CAD': 'CA$',
    'BGN': 'лв',
}

# Currencies whose symbol goes before the amount
PREFIX_CURRENCIES = ['USD', 'EUR', 'GBP', 'CAD']

IMAGE_EXTENSIONS = {'.jpg', '.jpeg', '.png', '.bmp', '.tiff', '.gif', '.webp'}

SPLIT_SYSTEM_PROMPT = """You split restaurant and retail bills between people.

Rules:
- Read every line item on the receipt with its exact price and quantity.
- Assign items to people following the instructions you are given, including
  exclusions such as "Sam didn't drink" or "Jo covers the appetizers".
- Share tax between people in proportion to their item subtotal.
- Share any tip the same way.
- The "owed" values must add up to the receipt total, plus tip if one was requested.
- Never return an empty "individuals" list. If one person is mentioned, they get
  every item. If nobody is named, use "Person 1", "Person 2" and so on.

Respond with JSON of exactly this shape:
{
  "total": number,
  "individuals": [
    {
      "name": "string",
      "items": [{"name": "string", "price": number, "quantity": number}],
      "subtotal": number,
      "taxShare": number,
      "tipShare": number,
      "owed": number
    }
  ]
}"""
