from allauth.account.forms import SignupForm as AllauthSignupForm
from django import forms
from .models import FormLevel, User


def _clean_form_class(value):
    value = (value or "").strip().upper()
    if value and FormLevel.from_form_class(value) is None:
        raise forms.ValidationError(
            "Form class must start with a form such as 1-5, 5-2, 6A-1 or 6B-1."
        )
    return value or None


class SignupForm(AllauthSignupForm):
    full_name = forms.CharField(max_length=128, label="Full name")
    form_class = forms.CharField(max_length=16, required=False, label="Form class")

    def clean_full_name(self):
        name = self.cleaned_data["full_name"].strip()
        if not name:
            raise forms.ValidationError("Full name is required")
        return name

    def clean_form_class(self):
        return _clean_form_class(self.cleaned_data.get("form_class"))


class ProfileForm(forms.ModelForm):
    class Meta:
        model = User
        fields = ["full_name", "form_class"]

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.fields["full_name"].required = True

    def clean_full_name(self):
        name = (self.cleaned_data.get("full_name") or "").strip()
        if not name:
            raise forms.ValidationError("Full name is required")
        return name

    def clean_form_class(self):
        return _clean_form_class(self.cleaned_data.get("form_class"))


class FormClassForm(forms.Form):
    form_class = forms.CharField(max_length=16, required=False)

    def clean_form_class(self):
        return _clean_form_class(self.cleaned_data.get("form_class"))
