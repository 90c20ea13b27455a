"""
-------------------------------------------------------------------------
System: SIKAS (Sistem Informasi Keuangan Sekolah)
Description: Finance app initialization. Handles funding sources and the ledger.
-------------------------------------------------------------------------
"""
