# shop/checks.py
from django.conf import settings
from django.core.checks import Error, Tags, Warning, register

from .checkout import normalize_number

HINT = "Set the WHATSAPP_NUMBER environment variable (digits only, e.g. 94771234567)."


@register(Tags.compatibility, deploy=False)
def whatsapp_destination_check(app_configs, **kwargs):
    """Orders must not silently go to the built-in fallback number."""
    if normalize_number(getattr(settings, "SHOP_WHATSAPP_NUMBER", "")):
        return []
    msg = "SHOP_WHATSAPP_NUMBER has no digits; checkout will use the built-in default number."
    if settings.DEBUG:
        return [Warning(msg, hint=HINT, id="shop.W001")]
    return [Error(msg, hint=HINT, id="shop.E001")]
