from eurofx import EuroFx

print(EuroFx.__version__)  # 0.1.0

# Default Usage (in-process memory cache)
fx = EuroFx()

# Accepted currencies
print(list(EuroFx.currencies()))
# => ['AUD', 'BGN', 'BRL', ..., 'EUR', ..., 'ZAR']

# Every currency expressed in USD
latest = fx.latest("USD", amount=100)
print(latest.rate_date, latest.rates["EUR"], latest.cache_ttl)
# => 2024-06-04 92.19... 82200

# Single pair
pair = fx.convert("USD", "GBP", amount=100)
print(pair.rate)
# => 78.04...

# 90-day series, newest first; dates without a rate for either side give None
history = fx.history("USD", "GBP")
print([(point.rate_date, point.rate) for point in history.points[:3]])

fx.close()

# SQLite / Postgres / MySQL / MongoDB caches shared across processes
with EuroFx("sqlite:///eurofx-cache.db") as shared:
    print(shared.convert("EUR", "JPY").rate)
