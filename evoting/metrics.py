# evoting/metrics.py
# Prometheus metrics; process memory/cpu come from the default registry collectors
import time

from prometheus_client import Counter, Gauge, Info

APP_VERSION = "1.0.0"

START_TIME = time.monotonic()

build_info = Info("evoting_build", "Voting app build information")
build_info.info({"version": APP_VERSION})

uptime_seconds = Gauge("evoting_uptime_seconds", "Seconds since the app process started")
uptime_seconds.set_function(lambda: time.monotonic() - START_TIME)

votes_cast = Counter("evoting_votes_cast_total", "Total number of votes recorded")
vote_rejections = Counter(
    "evoting_vote_rejections_total",
    "Vote attempts rejected before recording",
    ["reason"],
)
signups = Counter("evoting_signups_total", "Total number of registered users", ["role"])
