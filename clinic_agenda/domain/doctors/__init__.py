"""Doctors domain - doctors and medical specialties"""
