from django import forms


_ctrl = {'class': 'form-control'}


class LoginForm(forms.Form):
    display_name = forms.CharField(
        max_length=80,
        label='Name',
        widget=forms.TextInput(attrs={**_ctrl, 'autocomplete': 'username', 'autofocus': True}),
    )
    password = forms.CharField(
        label='Password',
        strip=False,
        widget=forms.PasswordInput(attrs={**_ctrl, 'autocomplete': 'current-password'}),
    )
