"""
-------------------------------------------------------------------------
System: SIKAS (Sistem Informasi Keuangan Sekolah)
Description: Package initialization for the dashboard app.
-------------------------------------------------------------------------
"""
