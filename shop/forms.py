# shop/forms.py
from django import forms
from django.utils.translation import gettext_lazy as _

from .models import PaymentMethod
from .order_message import CustomerInfo


class CheckoutForm(forms.Form):
    # phone/district completeness is enforced by CheckoutDispatcher
    phone = forms.CharField(label=_("Phone Number"), max_length=20, required=False)
    district = forms.CharField(label=_("District"), max_length=100, required=False)
    city = forms.CharField(label=_("City (Optional)"), max_length=100, required=False)
    payment_method = forms.ModelChoiceField(
        label=_("Payment Methods"),
        queryset=PaymentMethod.objects.none(),
        required=False,
        empty_label=None,
    )

    def __init__(self, *args, language: str | None = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.language = language
        field = self.fields["payment_method"]
        field.queryset = PaymentMethod.objects.active()
        field.label_from_instance = lambda pm: pm.display_name(language)

    def customer_info(self) -> CustomerInfo:
        data = self.cleaned_data
        method = data.get("payment_method")
        return CustomerInfo(
            phone=data.get("phone") or "",
            district=data.get("district") or "",
            city=data.get("city") or "",
            payment_method=method.display_name(self.language) if method else "",
        )
