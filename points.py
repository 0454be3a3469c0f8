import logging
import re
from datetime import datetime, date, time
from decimal import Context, Decimal, ROUND_CEILING
from typing import Dict

from errors import FieldParseError
from receipt import Receipt

logger = logging.getLogger(__name__)

RECEIPT_DATE_FORMAT = '%Y-%m-%d'
RECEIPT_TIME_FORMAT = '%H:%M'
# ASCII digits only; fullmatch so a trailing newline can't slip through
AMOUNT_PATTERN = re.compile(r"[0-9]+\.[0-9]{2}")
DATE_PATTERN = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")
TIME_PATTERN = re.compile(r"[0-9]{2}:[0-9]{2}")
RETAILER_CHARACTER_PATTERN = re.compile(r"[A-Za-z0-9]")  # ASCII only, independent of locale
POINTS_RETAILER_NAME_ALPHANUM_CHARACTER = 1
POINTS_TOTAL_HAS_NO_CENTS = 50
POINTS_TOTAL_IS_MULTIPLE_OF_QUARTERS = 25
POINTS_ITEMS_COUNT = 5
POINTS_ITEM_DESCRIPTION = Decimal("0.2")
POINTS_LARGE_TOTAL = 5
POINTS_ODD_PURCHASE_DAY = 6
POINTS_VALID_PURCHASE_HOUR = 10
QUARTER = Decimal("0.25")
LARGE_TOTAL_THRESHOLD = Decimal("10.00")
REWARD_ITEM_DESCRIPTION_LENGTH_FACTOR = 3
REWARD_TIME_START = time(14, 0)
REWARD_TIME_END = time(16, 0)  # exclusive


def parse_amount(amount: str) -> Decimal:
    """ Parses a currency amount such as "6.49" into an exact Decimal """
    if not AMOUNT_PATTERN.fullmatch(amount):
        raise FieldParseError(f"invalid amount ({amount})")
    return Decimal(amount)


def exact_context(amount: Decimal) -> Context:
    """ Decimal context wide enough that arithmetic on amount is never rounded """
    return Context(prec=len(amount.as_tuple().digits) + 2)


def parse_date(purchase_date: str) -> date:
    if not DATE_PATTERN.fullmatch(purchase_date):
        raise FieldParseError(f"invalid purchase date ({purchase_date})")
    try:
        return datetime.strptime(purchase_date, RECEIPT_DATE_FORMAT).date()
    except ValueError:
        raise FieldParseError(f"invalid purchase date ({purchase_date})")


def parse_time(purchase_time: str) -> time:
    if not TIME_PATTERN.fullmatch(purchase_time):
        raise FieldParseError(f"invalid purchase time ({purchase_time})")
    try:
        return datetime.strptime(purchase_time, RECEIPT_TIME_FORMAT).time()
    except ValueError:
        raise FieldParseError(f"invalid purchase time ({purchase_time})")


def score_retailer(retailer_name: str) -> int:
    """ One point per ASCII letter or digit in the retailer name """
    return len(RETAILER_CHARACTER_PATTERN.findall(retailer_name)) * POINTS_RETAILER_NAME_ALPHANUM_CHARACTER


def score_round_total(total: str) -> int:
    try:
        parsed_total = parse_amount(total)
    except FieldParseError as e:
        logger.debug("round total rule skipped: %s", e)
        return 0
    return POINTS_TOTAL_HAS_NO_CENTS if parsed_total == parsed_total.to_integral_value() else 0


def score_quarter_total(total: str) -> int:
    try:
        parsed_total = parse_amount(total)
    except FieldParseError as e:
        logger.debug("quarter total rule skipped: %s", e)
        return 0
    remainder = exact_context(parsed_total).remainder(parsed_total, QUARTER)
    return POINTS_TOTAL_IS_MULTIPLE_OF_QUARTERS if remainder == 0 else 0


def score_item_pairs(items) -> int:
    return (len(items) // 2) * POINTS_ITEMS_COUNT


def score_item_descriptions(items) -> int:
    """
    For each item whose trimmed description length is a positive multiple of 3,
    award price * 0.2 rounded up to the next whole point. A blank description
    (trimmed length 0) earns nothing, and neither does an item with an unparseable price.
    """
    points = 0
    for item in items:
        length = len(item.short_description.strip())
        if length == 0 or length % REWARD_ITEM_DESCRIPTION_LENGTH_FACTOR != 0:
            continue
        try:
            price = parse_amount(item.price)
        except FieldParseError as e:
            logger.debug("description rule skipped for %r: %s", item.short_description, e)
            continue
        scaled = exact_context(price).multiply(price, POINTS_ITEM_DESCRIPTION)
        points += int(scaled.to_integral_value(rounding=ROUND_CEILING))
    return points


def score_large_total(total: str) -> int:
    try:
        parsed_total = parse_amount(total)
    except FieldParseError as e:
        logger.debug("large total rule skipped: %s", e)
        return 0
    return POINTS_LARGE_TOTAL if parsed_total > LARGE_TOTAL_THRESHOLD else 0


def score_purchase_date(purchase_date: str) -> int:
    try:
        date_obj = parse_date(purchase_date)
    except FieldParseError as e:
        logger.debug("odd day rule skipped: %s", e)
        return 0
    return POINTS_ODD_PURCHASE_DAY if date_obj.day % 2 != 0 else 0


def score_purchase_time(purchase_time: str) -> int:
    try:
        time_obj = parse_time(purchase_time)
    except FieldParseError as e:
        logger.debug("afternoon rule skipped: %s", e)
        return 0
    return POINTS_VALID_PURCHASE_HOUR if REWARD_TIME_START <= time_obj < REWARD_TIME_END else 0


def score_breakdown(receipt: Receipt) -> Dict[str, int]:
    """ Points earned from each rule, keyed by rule name """
    return {
        "retailer": score_retailer(receipt.retailer),
        "round_total": score_round_total(receipt.total),
        "quarter_total": score_quarter_total(receipt.total),
        "item_pairs": score_item_pairs(receipt.items),
        "item_descriptions": score_item_descriptions(receipt.items),
        "large_total": score_large_total(receipt.total),
        "odd_day": score_purchase_date(receipt.purchase_date),
        "afternoon": score_purchase_time(receipt.purchase_time),
    }


def calculate_points(receipt: Receipt) -> int:
    """ Calculates points earned from each component of the receipt """
    breakdown = score_breakdown(receipt)
    logger.debug("points breakdown for %s: %s", receipt.retailer, breakdown)
    return sum(breakdown.values())
