"""
-------------------------------------------------------------------------
System: SIKAS (Sistem Informasi Keuangan Sekolah)
Description: Users app initialization. Handles authentication and RBAC.
-------------------------------------------------------------------------
"""
