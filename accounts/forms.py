from django import forms


class LoginForm(forms.Form):
    username = forms.CharField(
        max_length=50,
        widget=forms.TextInput(attrs={"placeholder": "Username", "autocomplete": "username"}),
    )
    password = forms.CharField(
        widget=forms.PasswordInput(attrs={"placeholder": "Enter your password"})
    )

    def clean_username(self):
        return self.cleaned_data.get("username", "").strip()


class RegistrationFormMixin:
    """Password confirmation shared by the doctor and patient sign-up forms."""

    def clean_confirm_password(self):
        password = self.cleaned_data.get("password")
        confirm_password = self.cleaned_data.get("confirm_password")

        if password and confirm_password and password != confirm_password:
            raise forms.ValidationError("Passwords do not match.")

        return confirm_password


def password_fields():
    return (
        forms.CharField(
            min_length=6,
            max_length=100,
            widget=forms.PasswordInput,
            error_messages={
                "min_length": "Password must be between 6 and 100 characters.",
                "max_length": "Password must be between 6 and 100 characters.",
            },
        ),
        forms.CharField(label="Confirm Password", widget=forms.PasswordInput),
    )
