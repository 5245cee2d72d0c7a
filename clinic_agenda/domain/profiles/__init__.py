"""Profiles domain - staff profiles, unit switching and login provisioning"""
