"""Patients domain - patient registry and search"""
