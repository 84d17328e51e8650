from django import forms

from apps.slots.registry import is_valid_label

_ctrl = {'class': 'form-control'}


class DateForm(forms.Form):
    date = forms.DateField(
        required=False,
        input_formats=['%Y-%m-%d'],
        label='Date',
        widget=forms.DateInput(attrs={**_ctrl, 'type': 'date'}),
    )


class TimeForm(forms.Form):
    time = forms.CharField(max_length=5, label='Time')

    def clean_time(self):
        value = self.cleaned_data['time']
        if not is_valid_label(value):
            raise forms.ValidationError('Please choose a time slot.')
        return value


class ConfirmForm(forms.Form):
    phone = forms.CharField(
        max_length=30,
        label='Phone number',
        widget=forms.TextInput(attrs={
            **_ctrl,
            'placeholder': 'e.g. 010-1234-5678',
            'autocomplete': 'tel',
            'inputmode': 'tel',
        }),
    )
    revision = forms.IntegerField(widget=forms.HiddenInput)

    def clean_phone(self):
        # Kept as typed; any non-empty value is accepted
        raw = self.cleaned_data.get('phone', '').strip()
        if not raw:
            raise forms.ValidationError('Phone number is required.')
        return raw
