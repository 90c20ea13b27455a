"""
-------------------------------------------------------------------------
System: SIKAS (Sistem Informasi Keuangan Sekolah)
Description: Validation forms for funding source and ledger payloads.
-------------------------------------------------------------------------
"""
from django import forms
from django.core.validators import RegexValidator
from django.utils.translation import gettext_lazy as _

from apps.finance.models import EntryType

# Accepts plain dates and the ISO timestamps browsers send for date inputs.
DATE_INPUT_FORMATS = [
    '%Y-%m-%d',
    '%Y-%m-%dT%H:%M:%S',
    '%Y-%m-%dT%H:%M:%SZ',
    '%Y-%m-%dT%H:%M:%S.%fZ',
]

period_validator = RegexValidator(
    r'^\d{4}-(0[1-9]|1[0-2])$',
    _('Period must use the YYYY-MM format.')
)


class FundingSourceForm(forms.Form):
    """Create (or reuse) a funding source."""

    name = forms.CharField(min_length=2, max_length=80, label=_('Name'))
    agency = forms.CharField(min_length=2, max_length=80, required=False, label=_('Agency'))


class LedgerEntryForm(forms.Form):
    """Manual ledger entry recorded by the Bendahara."""

    entry_type = forms.ChoiceField(choices=EntryType.choices, label=_('Type'))
    amount = forms.IntegerField(min_value=1, label=_('Amount'))
    date = forms.DateField(input_formats=DATE_INPUT_FORMATS, label=_('Date'))
    description = forms.CharField(max_length=200, required=False, label=_('Description'))
    funding_source_id = forms.IntegerField(min_value=1, required=False)
    rkab_item_id = forms.IntegerField(min_value=1, required=False)

    def clean(self):
        cleaned_data = super().clean()
        if (cleaned_data.get('entry_type') == EntryType.EXPENSE
                and cleaned_data.get('funding_source_id')):
            self.add_error('funding_source_id', _('Expense entries do not take a funding source.'))
        return cleaned_data


class IncomeForm(forms.Form):
    """Income recorded from the income page."""

    amount = forms.IntegerField(min_value=1, label=_('Amount'))
    date = forms.DateField(input_formats=DATE_INPUT_FORMATS, label=_('Date'))
    description = forms.CharField(max_length=200, required=False, label=_('Description'))
    funding_source_id = forms.IntegerField(min_value=1, required=False)


class LedgerQueryForm(forms.Form):
    """Query-string filters for the ledger listing."""

    period = forms.CharField(required=False, validators=[period_validator])
    type = forms.ChoiceField(choices=EntryType.choices, required=False)
    q = forms.CharField(max_length=80, required=False)
    cursor = forms.IntegerField(min_value=1, required=False)
    take = forms.IntegerField(min_value=1, max_value=50, required=False)


class TransactionQueryForm(forms.Form):
    """Query-string filters for the rolling transaction history."""

    FILTER_ALL = 'all'
    FILTER_TYPES = {
        'income': EntryType.INCOME,
        'expense': EntryType.EXPENSE,
    }

    filter = forms.ChoiceField(
        choices=[(FILTER_ALL, _('All')), ('income', _('Income')), ('expense', _('Expense'))],
        required=False
    )
    q = forms.CharField(max_length=80, required=False)
    cursor = forms.IntegerField(min_value=1, required=False)
    take = forms.IntegerField(min_value=1, max_value=50, required=False)

    def clean_filter(self):
        return self.cleaned_data.get('filter') or self.FILTER_ALL
