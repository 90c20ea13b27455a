"""
-------------------------------------------------------------------------
System: SIKAS (Sistem Informasi Keuangan Sekolah)
Description: Validation forms for budget request and RKAS payloads.
-------------------------------------------------------------------------
"""
from django import forms
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from apps.finance.forms import DATE_INPUT_FORMATS


class BudgetRequestForm(forms.Form):
    """
    Create or edit a budget request.

    Empty optional fields are normalized to None.
    """

    title = forms.CharField(min_length=3, max_length=120, label=_('Title'))
    description = forms.CharField(max_length=2000, required=False, label=_('Description'))
    amount_requested = forms.IntegerField(min_value=1, label=_('Amount Requested'))
    needed_by = forms.DateField(input_formats=DATE_INPUT_FORMATS, required=False, label=_('Needed By'))
    draft = forms.BooleanField(required=False)

    def clean_description(self):
        description = self.cleaned_data.get('description', '').strip()
        if not description:
            return None
        if len(description) < 10:
            raise forms.ValidationError(_('Description must be at least 10 characters.'))
        return description

    def clean_needed_by(self):
        needed_by = self.cleaned_data.get('needed_by')
        if needed_by and needed_by < timezone.localdate():
            raise forms.ValidationError(_('The needed-by date cannot be in the past.'))
        return needed_by


class DecisionForm(forms.Form):
    """Approve or reject a request or an RKAS."""

    ACTION_APPROVE = 'approve'
    ACTION_REJECT = 'reject'

    action = forms.ChoiceField(choices=[(ACTION_APPROVE, _('Approve')), (ACTION_REJECT, _('Reject'))])
    note = forms.CharField(max_length=500, required=False, label=_('Note'))

    def clean(self):
        cleaned_data = super().clean()
        if cleaned_data.get('action') == self.ACTION_REJECT and not cleaned_data.get('note'):
            self.add_error('note', _('A note is required when rejecting.'))
        return cleaned_data


class RkabForm(forms.Form):
    fiscal_year = forms.IntegerField(min_value=2000, max_value=2100, label=_('Fiscal Year'))


class RkabItemForm(forms.Form):
    """A single line in an add-items batch."""

    budget_request_id = forms.IntegerField(min_value=1)
    amount_allocated = forms.IntegerField(min_value=1, label=_('Amount Allocated'))
    note = forms.CharField(max_length=200, required=False, label=_('Note'))

    def clean_note(self):
        return self.cleaned_data.get('note', '').strip() or None
