"""
-------------------------------------------------------------------------
System: SIKAS (Sistem Informasi Keuangan Sekolah)
Description: Validation forms for report generation and listing.
-------------------------------------------------------------------------
"""
from django import forms

from apps.finance.forms import period_validator
from apps.reporting.models import ReportType


class GenerateReportForm(forms.Form):
    type = forms.ChoiceField(choices=ReportType.choices)
    period = forms.CharField(validators=[period_validator])


class ReportQueryForm(forms.Form):
    type = forms.ChoiceField(choices=ReportType.choices, required=False)
    period = forms.CharField(required=False, validators=[period_validator])
