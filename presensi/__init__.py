"""Presensi attendance service."""
