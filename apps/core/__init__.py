"""
-------------------------------------------------------------------------
System: SIKAS (Sistem Informasi Keuangan Sekolah)
Description: Core app initialization. Contains shared mixins and exceptions.
-------------------------------------------------------------------------
"""
