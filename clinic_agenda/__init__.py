"""Clinic agenda API - multi-tenant scheduling for medical clinics"""
