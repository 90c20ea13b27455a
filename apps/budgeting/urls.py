"""
-------------------------------------------------------------------------
System: SIKAS (Sistem Informasi Keuangan Sekolah)
Description: URL configuration for requests, approvals, disbursements
             and RKAS.
-------------------------------------------------------------------------
"""
from django.urls import path

from apps.budgeting import views, views_rkab

app_name = 'budgeting'

urlpatterns = [
    # Civitas: own requests
    path('requests/', views.RequestListCreateAPIView.as_view(), name='request_list'),
    path('requests/eligible-for-proof/', views.EligibleForProofAPIView.as_view(), name='eligible_for_proof'),
    path('requests/<int:pk>/', views.RequestDetailAPIView.as_view(), name='request_detail'),
    path('requests/<int:pk>/submit/', views.RequestSubmitAPIView.as_view(), name='request_submit'),
    path('requests/<int:pk>/cancel/', views.RequestCancelAPIView.as_view(), name='request_cancel'),
    path('requests/<int:pk>/proofs/', views.RequestProofAPIView.as_view(), name='request_proofs'),

    # Kepsek: approvals
    path('approvals/', views.ApprovalListAPIView.as_view(), name='approval_list'),
    path('approvals/requests/<int:pk>/', views.ApprovalRequestDetailAPIView.as_view(), name='approval_detail'),
    path('approvals/requests/<int:pk>/decision/', views.ApprovalDecisionAPIView.as_view(),
         name='approval_decision'),

    # Bendahara: disbursements
    path('disbursements/', views.DisbursementListAPIView.as_view(), name='disbursement_list'),
    path('disbursements/<int:pk>/', views.DisbursementDetailAPIView.as_view(), name='disbursement_detail'),
    path('disbursements/<int:pk>/disburse/', views.DisburseAPIView.as_view(), name='disburse'),
    path('disbursements/<int:pk>/validate/', views.ValidateCompletionAPIView.as_view(),
         name='validate_completion'),

    # RKAS
    path('rkab/', views_rkab.RkabListCreateAPIView.as_view(), name='rkab_list'),
    path('rkab/candidates/', views_rkab.RkabCandidatesAPIView.as_view(), name='rkab_candidates'),
    path('rkab/realisasi/', views_rkab.RealisasiAPIView.as_view(), name='rkab_realisasi'),
    path('rkab/<int:pk>/', views_rkab.RkabDetailAPIView.as_view(), name='rkab_detail'),
    path('rkab/<int:pk>/items/', views_rkab.RkabItemsAPIView.as_view(), name='rkab_items'),
    path('rkab/<int:pk>/submit/', views_rkab.RkabSubmitAPIView.as_view(), name='rkab_submit'),
    path('rkab/<int:pk>/decision/', views_rkab.RkabDecisionAPIView.as_view(), name='rkab_decision'),
]
