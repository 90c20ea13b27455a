"""
-------------------------------------------------------------------------
System: SIKAS (Sistem Informasi Keuangan Sekolah)
Description: URL configuration for funding sources and the ledger.
-------------------------------------------------------------------------
"""
from django.urls import path

from apps.finance.views import (
    FundingSourceAPIView,
    IncomeAPIView,
    LedgerEntryAPIView,
    TransactionAPIView,
)

app_name = 'finance'

urlpatterns = [
    path('funding-sources/', FundingSourceAPIView.as_view(), name='funding_sources'),
    path('ledger-entries/', LedgerEntryAPIView.as_view(), name='ledger_entries'),
    path('income/', IncomeAPIView.as_view(), name='income'),
    path('transactions/', TransactionAPIView.as_view(), name='transactions'),
]
