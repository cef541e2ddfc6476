"""
Prometheus metrics for monitoring
"""
from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest

# ==================== HTTP Metrics ====================

http_requests_total = Counter(
    'http_requests_total',
    'Total HTTP requests',
    ['method', 'endpoint', 'status']
)

http_request_duration_seconds = Histogram(
    'http_request_duration_seconds',
    'HTTP request duration in seconds',
    ['method', 'endpoint']
)

# ==================== Booking Metrics ====================

bookings_created_total = Counter(
    'bookings_created_total',
    'Total bookings committed',
    ['seating_mode']  # GA, SEATED
)

bookings_failed_total = Counter(
    'bookings_failed_total',
    'Total bookings aborted',
    ['seating_mode', 'error_code']
)

tickets_issued_total = Counter(
    'tickets_issued_total',
    'Total tickets issued',
    ['seating_mode']
)

booking_duration_seconds = Histogram(
    'booking_duration_seconds',
    'Time to run one booking transaction',
    ['seating_mode'],
    buckets=[0.01, 0.05, 0.1, 0.5, 1.0, 2.0, 5.0]
)

# ==================== Helper Functions ====================

def record_booking_success(seating_mode: str, ticket_count: int):
    """Record a committed booking"""
    bookings_created_total.labels(seating_mode=seating_mode).inc()
    tickets_issued_total.labels(seating_mode=seating_mode).inc(ticket_count)


def record_booking_failure(seating_mode: str, error_code: str):
    """Record an aborted booking"""
    bookings_failed_total.labels(seating_mode=seating_mode, error_code=error_code).inc()


def get_metrics():
    """Get current metrics in Prometheus format"""
    return generate_latest(), CONTENT_TYPE_LATEST
