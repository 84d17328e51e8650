"""Admin console forms:
 - MemberCreateForm / MemberEditForm
 - BookingForm: full booking record, handed to the ledger as a dict
 - SlotDateForm: which date the slot editor works on
"""
from django import forms

from apps.accounts.models import Member, Role
from apps.bookings.models import Booking, BookingStatus
from apps.slots.registry import is_valid_label


_ctrl = {'class': 'form-control'}
_ta   = lambda r: {'class': 'form-control', 'rows': r}


# ── Members ───────────────────────────────────────────────────────────────────

class MemberCreateForm(forms.Form):
    display_name = forms.CharField(
        max_length=80,
        label='Display name',
        widget=forms.TextInput(attrs={**_ctrl, 'placeholder': 'Login name'}),
    )
    password = forms.CharField(
        label='Password',
        strip=False,
        widget=forms.PasswordInput(attrs={**_ctrl, 'autocomplete': 'new-password'}),
    )
    role = forms.ChoiceField(choices=Role.choices, initial=Role.USER,
                             widget=forms.Select(attrs=_ctrl))


class MemberEditForm(forms.Form):
    display_name = forms.CharField(
        max_length=80,
        label='Display name',
        widget=forms.TextInput(attrs=_ctrl),
    )
    role = forms.ChoiceField(choices=Role.choices, widget=forms.Select(attrs=_ctrl))


# ── Bookings ──────────────────────────────────────────────────────────────────

class BookingForm(forms.ModelForm):
    user = forms.ModelChoiceField(
        queryset=Member.objects.order_by('display_name'), label='Member',
        widget=forms.Select(attrs=_ctrl),
    )
    host = forms.ModelChoiceField(
        queryset=Member.objects.order_by('display_name'), required=False, label='Host',
        widget=forms.Select(attrs=_ctrl),
    )
    time = forms.CharField(
        max_length=8, label='Time',
        widget=forms.TimeInput(attrs={**_ctrl, 'type': 'time', 'step': 1800}),
    )

    class Meta:
        model  = Booking
        fields = [
            'user', 'user_phone', 'host', 'host_name', 'location',
            'date', 'time', 'status', 'title', 'notes',
        ]
        widgets = {
            'user_phone': forms.TextInput(attrs={**_ctrl, 'placeholder': '010-1234-5678'}),
            'host_name':  forms.TextInput(attrs={**_ctrl, 'placeholder': 'Defaults to the host member'}),
            'location':   forms.TextInput(attrs=_ctrl),
            'date':       forms.DateInput(attrs={**_ctrl, 'type': 'date'}, format='%Y-%m-%d'),
            'status':     forms.Select(attrs=_ctrl),
            'title':      forms.TextInput(attrs=_ctrl),
            'notes':      forms.Textarea(attrs=_ta(3)),
        }

    def clean_time(self):
        value = (self.cleaned_data.get('time') or '').strip()
        # Browsers may post HH:MM:SS from time inputs
        if len(value) == 8 and value.endswith(':00'):
            value = value[:5]
        if not is_valid_label(value):
            raise forms.ValidationError('Enter a time as HH:MM.')
        return value

    def to_record(self) -> dict:
        """cleaned_data in the shape the booking ledger takes."""
        data = dict(self.cleaned_data)
        data['user'] = data['user'].pk
        data['host'] = data['host'].pk if data.get('host') else None
        return data


class StatusForm(forms.Form):
    status = forms.ChoiceField(choices=BookingStatus.choices)


# ── Slots ─────────────────────────────────────────────────────────────────────

class SlotDateForm(forms.Form):
    date = forms.DateField(
        input_formats=['%Y-%m-%d'],
        widget=forms.DateInput(attrs={**_ctrl, 'type': 'date'}, format='%Y-%m-%d'),
    )
