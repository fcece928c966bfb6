# tikerama/services/endpoints.py
# Paths of the Tikerama REST backend, relative to API_URL

AUTH_REGISTER = "/auth/register/"
AUTH_LOGIN = "/auth/login/"
AUTH_REQUEST_EMAIL_OTP = "/auth/send-otp/"
AUTH_VERIFY_EMAIL_OTP = "/auth/verify-otp/"
AUTH_LOGOUT = "/auth/logout/"
AUTH_REFRESH = "/auth/refresh/"
AUTH_ME = "/auth/me/"

EVENTS = "/events/"
EVENTS_MINE = "/events/my-events/"


def event_detail(event_id) -> str:
    return f"/events/{event_id}/"


ORDERS = "/orders/"


def order_detail(order_id) -> str:
    return f"/orders/{order_id}/"


def order_tickets(order_id) -> str:
    return f"/orders/{order_id}/tickets/"


TICKETS = "/tickets/"


def ticket_detail(ticket_id) -> str:
    return f"/tickets/{ticket_id}/"


def ticket_validate(ticket_id) -> str:
    return f"/tickets/{ticket_id}/validate/"


PAYMENTS_INITIATE = "/payments/initiate/"


def payment_status(transaction_id) -> str:
    return f"/payments/{transaction_id}/status/"


def payment_confirm(transaction_id) -> str:
    return f"/payments/{transaction_id}/confirm/"


ADMIN_DASHBOARD = "/admin/dashboard/"
ADMIN_SALES = "/admin/sales/"
ADMIN_EVENTS = "/admin/events/"
