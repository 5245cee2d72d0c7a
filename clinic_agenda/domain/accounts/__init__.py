"""Accounts domain - organization signup"""
