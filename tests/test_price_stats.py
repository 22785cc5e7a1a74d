from datetime import date, timedelta
from decimal import Decimal

from bazaarbuddy.services.analytics import bucket_date
from bazaarbuddy.services.price_stats import (
    compare_prices,
    compute_statistics,
    generate_insights,
    generate_recommendations,
    historical_window,
    pct_change,
    recent_window,
)


def _series(prices, product_id=1, name="Onion", category="vegetables", start=date(2024, 1, 1), step=1):
    return [
        {
            "date": (start + timedelta(days=i * step)).isoformat(),
            "productId": product_id,
            "productName": name,
            "category": category,
            "price": Decimal(str(p)),
            "volume": 1,
        }
        for i, p in enumerate(prices)
    ]


def _titles(insights):
    return [i["title"] for i in insights]


def test_statistics_for_rising_series():
    stats = compute_statistics(_series([10, 10, 10, 20, 20, 20]))
    basic, trend = stats["basic"], stats["trend"]
    assert stats["hasData"] is True
    assert basic["avgPrice"] == 15
    assert (basic["minPrice"], basic["maxPrice"], basic["priceRange"]) == (10, 20, 10)
    assert basic["volatility"] == 5
    assert basic["volatilityLevel"] == "High"
    assert trend["firstHalfAvg"] == 10
    assert trend["secondHalfAvg"] == 20
    assert trend["direction"] == "up"
    assert trend["percentage"] == 100


def test_statistics_for_empty_series():
    assert compute_statistics([]) == {"hasData": False}
    assert generate_insights([]) == []
    assert generate_recommendations([]) == []


def test_single_point_trend_is_stable():
    trend = compute_statistics(_series([42]))["trend"]
    assert trend["direction"] == "stable"
    assert trend["percentage"] == 0


def test_statistics_are_deterministic():
    data = _series([12, 15, 11, 18, 14, 16, 13])
    assert compute_statistics(data) == compute_statistics(data)
    assert generate_insights(data) == generate_insights(data)
    assert generate_recommendations(data) == generate_recommendations(data)


def test_product_volatility_flags():
    data = _series([10] * 10, product_id=1, name="Rice") + _series([2, 30, 2, 30], product_id=2, name="Saffron")
    products = {p["name"]: p for p in compute_statistics(data)["products"]}
    assert products["Rice"]["volatilityFlag"] == "stable"
    assert products["Saffron"]["volatilityFlag"] == "high"
    assert products["Saffron"]["dataPoints"] == 4


def test_windows_use_floor_sizes():
    values = list(range(10))
    assert recent_window(values) == [7, 8, 9]
    assert historical_window(values) == [0, 1, 2, 3, 4, 5, 6]
    assert recent_window([1, 2, 3]) == []
    assert pct_change(Decimal("5"), Decimal("0")) == 0


def test_bucket_dates():
    assert bucket_date(date(2024, 1, 3), "daily") == "2024-01-03"
    assert bucket_date(date(2024, 1, 3), "weekly") == "2023-12-31"
    assert bucket_date(date(2024, 1, 7), "weekly") == "2024-01-07"
    assert bucket_date(date(2024, 2, 15), "monthly") == "2024-02-01"


def test_compare_by_category():
    data = _series([10, 20], product_id=1, name="Onion") + _series([30], product_id=2, name="Mango", category="fruits")
    result = {row["name"]: row for row in compare_prices(data, "categories")}
    assert result["vegetables"]["avgPrice"] == 15
    assert result["vegetables"]["spread"] == 10
    assert result["vegetables"]["totalVolume"] == 2
    assert result["fruits"]["count"] == 1


def test_insights_for_sharp_rise():
    insights = generate_insights(_series([10] * 7 + [20] * 3))
    titles = _titles(insights)
    assert "Significant Price Increase" in titles
    assert "High Price Volatility" in titles
    assert "Onion - Rising Prices" in titles
    assert "Optimal Purchase Day" in titles
    assert "Seasonal Price Pattern" not in titles

    rise = next(i for i in insights if i["title"] == "Significant Price Increase")
    assert rise["description"] == "Prices have increased by 100.0% recently"
    day = next(i for i in insights if i["title"] == "Optimal Purchase Day")
    assert day["description"] == "Sunday typically has the lowest prices"

    ranks = [{"high": 3, "medium": 2, "low": 1}[i["priority"]] for i in insights]
    assert ranks == sorted(ranks, reverse=True)


def test_insights_for_flat_prices():
    titles = _titles(generate_insights(_series([10] * 6)))
    assert "Stable Market Conditions" in titles
    assert "Significant Price Increase" not in titles
    assert "Significant Price Decrease" not in titles


def test_insights_for_falling_prices():
    titles = _titles(generate_insights(_series([20] * 7 + [10] * 3)))
    assert "Significant Price Decrease" in titles
    assert "Onion - Falling Prices" in titles


def test_seasonal_pattern_needs_three_months():
    data = _series([30, 10, 20], start=date(2024, 1, 15), step=31)
    insight = next(i for i in generate_insights(data) if i["title"] == "Seasonal Price Pattern")
    assert insight["description"] == "Lowest prices typically in Feb, highest in Jan"
    assert insight["priority"] == "medium"


def test_recommend_buy_near_low():
    (rec,) = generate_recommendations(_series([20] * 8 + [10, 10]))
    assert rec["action"] == "BUY"
    assert rec["confidence"] == "High"
    assert rec["currentPrice"] == 10
    assert rec["savings"] == Decimal("44.4")


def test_recommend_wait_near_high():
    (rec,) = generate_recommendations(_series([10] * 8 + [20, 20]))
    assert rec["action"] == "WAIT"
    assert rec["premium"] == Decimal("66.7")


def test_recommend_consider_when_recent_dips():
    (rec,) = generate_recommendations(_series([10, 20, 20, 20, 20, 20, 20, 20, 15, 14]))
    assert rec["action"] == "CONSIDER"
    assert rec["confidence"] == "Medium"
    assert rec["savings"] == Decimal("21.8")


def test_no_recommendation_in_the_middle():
    assert generate_recommendations(_series([10, 20, 16, 16, 16])) == []


def test_short_series_has_no_recent_window():
    for prices in ([10], [10, 30], [10, 10, 40]):
        assert recent_window(prices) == []
        titles = _titles(generate_insights(_series(prices)))
        assert "Significant Price Increase" not in titles
        assert "Onion - Rising Prices" not in titles
    assert recent_window([10, 10, 10, 40]) == [40]
