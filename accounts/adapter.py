from allauth.account.adapter import DefaultAccountAdapter


class MemberAccountAdapter(DefaultAccountAdapter):
    def save_user(self, request, user, form, commit=True):
        user = super().save_user(request, user, form, commit=False)
        data = form.cleaned_data
        user.full_name = (data.get("full_name") or "").strip()
        user.form_class = data.get("form_class") or None
        if commit:
            user.save()
        return user
