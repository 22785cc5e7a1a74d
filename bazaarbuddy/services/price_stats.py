"""Descriptive statistics and rule-based advice over price points.

Everything here is a pure function of the ordered price series produced
by ``compute_price_trends``; identical input gives identical output.
Monetary values are Decimals and an empty series short-circuits instead
of dividing by zero.
"""
from collections import OrderedDict
from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, List

ZERO = Decimal("0")
HUNDRED = Decimal("100")
ONE_DP = Decimal("0.1")

# Thresholds are part of the observable behaviour; do not tune them.
SIGNIFICANT_CHANGE_PCT = Decimal("10")
PRODUCT_TREND_PCT = Decimal("15")
HIGH_VOLATILITY_PCT = Decimal("20")
STABLE_VOLATILITY_PCT = Decimal("5")
HIGH_VOLATILITY_FACTOR = Decimal("1.5")
STABLE_VOLATILITY_FACTOR = Decimal("0.5")
EXPENSIVE_FACTOR = Decimal("1.2")
AFFORDABLE_FACTOR = Decimal("0.8")
BUY_FACTOR = Decimal("1.1")
WAIT_FACTOR = Decimal("0.9")
CONSIDER_FACTOR = Decimal("0.95")

MONTH_NAMES = ["Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]
# Sunday first, matching the weekly buckets
DAY_NAMES = ["Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"]
PRIORITY_RANK = {"high": 3, "medium": 2, "low": 1}


def _dec(value) -> Decimal:
    return value if isinstance(value, Decimal) else Decimal(str(value))


def mean(values) -> Decimal:
    return sum(values, ZERO) / len(values)


def population_std(values) -> Decimal:
    mu = mean(values)
    return (sum(((x - mu) ** 2 for x in values), ZERO) / len(values)).sqrt()


def pct_change(new: Decimal, old: Decimal) -> Decimal:
    if old == 0:
        return ZERO
    return (new - old) / old * HUNDRED


def _share_of(delta: Decimal, whole: Decimal) -> Decimal:
    """``delta`` as a percentage of ``whole``, to one decimal place."""
    if whole == 0:
        return ZERO
    return (delta / whole * HUNDRED).quantize(ONE_DP, rounding=ROUND_HALF_UP)


def recent_window(values: list) -> list:
    """Last 30% of the series (floor), empty when that rounds to nothing.

    Series of three points or fewer therefore have no recent window and
    yield no price-change insight.
    """
    size = len(values) * 3 // 10
    return values[len(values) - size:] if size else []


def historical_window(values: list) -> list:
    """First 70% of the series (floor)."""
    return values[: len(values) * 7 // 10]


def _prices(data) -> List[Decimal]:
    return [_dec(point["price"]) for point in data]


def _group_by_product(data) -> "OrderedDict[object, dict]":
    groups: "OrderedDict[object, dict]" = OrderedDict()
    for point in data:
        key = point.get("productId", point.get("productName"))
        group = groups.setdefault(
            key,
            {"name": point.get("productName"), "category": point.get("category"), "prices": [], "volumes": []},
        )
        group["prices"].append(_dec(point["price"]))
        group["volumes"].append(point.get("volume") or 0)
    return groups


def _trend(prices: List[Decimal]) -> dict:
    half = len(prices) // 2
    if half == 0:
        avg = mean(prices)
        return {"direction": "stable", "percentage": ZERO, "firstHalfAvg": avg, "secondHalfAvg": avg}
    first, second = mean(prices[:half]), mean(prices[half:])
    if second > first:
        direction = "up"
    elif second < first:
        direction = "down"
    else:
        direction = "stable"
    return {
        "direction": direction,
        "percentage": pct_change(second, first),
        "firstHalfAvg": first,
        "secondHalfAvg": second,
    }


def compute_statistics(data: List[dict]) -> dict:
    if not data:
        return {"hasData": False}

    prices = _prices(data)
    avg_price = mean(prices)
    min_price, max_price = min(prices), max(prices)
    volatility = population_std(prices)

    products = []
    for group in _group_by_product(data).values():
        p = group["prices"]
        p_avg, p_vol = mean(p), population_std(p)
        if p_vol > volatility * HIGH_VOLATILITY_FACTOR:
            flag = "high"
        elif p_vol < volatility * STABLE_VOLATILITY_FACTOR:
            flag = "stable"
        else:
            flag = "normal"
        products.append({
            "name": group["name"],
            "category": group["category"],
            "avgPrice": p_avg,
            "minPrice": min(p),
            "maxPrice": max(p),
            "volatility": p_vol,
            "priceRange": max(p) - min(p),
            "dataPoints": len(p),
            "volatilityFlag": flag,
        })

    return {
        "hasData": True,
        "basic": {
            "totalDataPoints": len(prices),
            "avgPrice": avg_price,
            "minPrice": min_price,
            "maxPrice": max_price,
            "priceRange": max_price - min_price,
            "volatility": volatility,
            "volatilityLevel": "High" if volatility > avg_price * HIGH_VOLATILITY_PCT / HUNDRED else "Low",
        },
        "trend": _trend(prices),
        "products": products,
        "insights": {
            "highVolatilityProducts": [p for p in products if p["volatilityFlag"] == "high"],
            "stableProducts": [p for p in products if p["volatilityFlag"] == "stable"],
            "expensiveProducts": [p for p in products if p["avgPrice"] > avg_price * EXPENSIVE_FACTOR],
            "affordableProducts": [p for p in products if p["avgPrice"] < avg_price * AFFORDABLE_FACTOR],
        },
    }


def compare_prices(data: List[dict], by: str = "products") -> List[dict]:
    """Side-by-side price summary per product name or per category."""
    key_name = "productName" if by == "products" else "category"
    groups: Dict[object, dict] = OrderedDict()
    for point in data:
        name = point.get(key_name)
        price = _dec(point["price"])
        stat = groups.get(name)
        if stat is None:
            stat = groups[name] = {"name": name, "total": ZERO, "minPrice": price, "maxPrice": price,
                                   "totalVolume": 0, "count": 0}
        stat["total"] += price
        stat["minPrice"] = min(stat["minPrice"], price)
        stat["maxPrice"] = max(stat["maxPrice"], price)
        stat["totalVolume"] += point.get("volume") or 0
        stat["count"] += 1
    result = []
    for stat in groups.values():
        total = stat.pop("total")
        stat["avgPrice"] = total / stat["count"]
        stat["spread"] = stat["maxPrice"] - stat["minPrice"]
        result.append(stat)
    return result


def _insight(kind, title, description, action, priority):
    return {"type": kind, "title": title, "description": description, "action": action, "priority": priority}


def _cheapest(averages: Dict[int, Decimal]):
    return min(averages.items(), key=lambda kv: (kv[1], kv[0]))[0]


def _dearest(averages: Dict[int, Decimal]):
    return max(averages.items(), key=lambda kv: (kv[1], kv[0]))[0]


def _bucket_averages(data, key_fn) -> Dict[int, Decimal]:
    buckets: Dict[int, List[Decimal]] = {}
    for point in data:
        buckets.setdefault(key_fn(point["date"]), []).append(_dec(point["price"]))
    return {k: mean(v) for k, v in buckets.items()}


def _month_of(iso: str) -> int:
    return date.fromisoformat(iso).month - 1


def _weekday_of(iso: str) -> int:
    return (date.fromisoformat(iso).weekday() + 1) % 7


def generate_insights(data: List[dict]) -> List[dict]:
    if not data:
        return []

    insights = []
    prices = _prices(data)
    avg_price = mean(prices)

    recent, historical = recent_window(prices), historical_window(prices)
    if recent and historical:
        change = pct_change(mean(recent), mean(historical))
        if abs(change) > SIGNIFICANT_CHANGE_PCT:
            rising = change > 0
            insights.append(_insight(
                "warning" if rising else "success",
                f"Significant Price {'Increase' if rising else 'Decrease'}",
                f"Prices have {'increased' if rising else 'decreased'} by {abs(change):.1f}% recently",
                "Consider bulk purchasing before further increases" if rising else "Good time to increase inventory",
                "high",
            ))

    monthly = _bucket_averages(data, _month_of)
    if len(monthly) >= 3:
        low, high = MONTH_NAMES[_cheapest(monthly)], MONTH_NAMES[_dearest(monthly)]
        insights.append(_insight(
            "info",
            "Seasonal Price Pattern",
            f"Lowest prices typically in {low}, highest in {high}",
            f"Plan purchases for {low} to maximize savings",
            "medium",
        ))

    volatility = population_std(prices)
    volatility_pct = volatility / avg_price * HUNDRED if avg_price else ZERO
    if volatility_pct > HIGH_VOLATILITY_PCT:
        insights.append(_insight(
            "warning",
            "High Price Volatility",
            f"Price volatility is {volatility_pct:.1f}%, indicating unstable market conditions",
            "Consider smaller, more frequent orders to reduce risk",
            "high",
        ))
    elif volatility_pct < STABLE_VOLATILITY_PCT:
        insights.append(_insight(
            "success",
            "Stable Market Conditions",
            f"Low volatility ({volatility_pct:.1f}%) indicates stable pricing",
            "Good time for bulk purchasing and long-term contracts",
            "low",
        ))

    for group in _group_by_product(data).values():
        name, p = group["name"], group["prices"]
        if population_std(p) > volatility * HIGH_VOLATILITY_FACTOR:
            insights.append(_insight(
                "warning",
                f"{name} - High Volatility",
                "This product shows higher than average price fluctuations",
                "Monitor closely and consider alternative suppliers",
                "medium",
            ))
        p_recent, p_hist = recent_window(p), historical_window(p)
        if p_recent and p_hist:
            trend = pct_change(mean(p_recent), mean(p_hist))
            if trend > PRODUCT_TREND_PCT:
                insights.append(_insight(
                    "warning",
                    f"{name} - Rising Prices",
                    f"Prices increased by {trend:.1f}% recently",
                    "Consider stocking up or finding alternative suppliers",
                    "high",
                ))
            elif trend < -PRODUCT_TREND_PCT:
                insights.append(_insight(
                    "success",
                    f"{name} - Falling Prices",
                    f"Prices decreased by {abs(trend):.1f}% recently",
                    "Good opportunity to increase inventory",
                    "medium",
                ))

    weekly = _bucket_averages(data, _weekday_of)
    if len(weekly) >= 5:
        day = DAY_NAMES[_cheapest(weekly)]
        insights.append(_insight(
            "info",
            "Optimal Purchase Day",
            f"{day} typically has the lowest prices",
            f"Schedule regular orders for {day}s",
            "low",
        ))

    return sorted(insights, key=lambda i: -PRIORITY_RANK[i["priority"]])


def generate_recommendations(data: List[dict]) -> List[dict]:
    """BUY / WAIT / CONSIDER advice per product.

    The recent window is every point from index floor(0.8 * n) onwards;
    a product's current price is its last price inside that window, or
    its overall average when it has none there.
    """
    if not data:
        return []

    recent_start = len(data) * 8 // 10
    products: "OrderedDict[object, dict]" = OrderedDict()
    for index, point in enumerate(data):
        key = point.get("productId", point.get("productName"))
        product = products.setdefault(
            key, {"name": point.get("productName"), "category": point.get("category"), "prices": [], "recent": []}
        )
        price = _dec(point["price"])
        product["prices"].append(price)
        if index >= recent_start:
            product["recent"].append(price)

    recommendations = []
    for product in products.values():
        prices, recent = product["prices"], product["recent"]
        avg_price = mean(prices)
        recent_avg = mean(recent) if recent else avg_price
        current = recent[-1] if recent else avg_price
        base = {"product": product["name"], "category": product["category"],
                "currentPrice": current, "avgPrice": avg_price}

        if current <= min(prices) * BUY_FACTOR:
            rec = dict(base, action="BUY", reason="Near historical low", confidence="High",
                       savings=_share_of(avg_price - current, avg_price))
        elif current >= max(prices) * WAIT_FACTOR:
            rec = dict(base, action="WAIT", reason="Near historical high", confidence="High",
                       premium=_share_of(current - avg_price, avg_price))
        elif recent_avg < avg_price * CONSIDER_FACTOR:
            rec = dict(base, action="CONSIDER", reason="Below average price", confidence="Medium",
                       savings=_share_of(avg_price - current, avg_price))
        else:
            continue
        recommendations.append(rec)
    return recommendations
