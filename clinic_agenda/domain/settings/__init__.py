"""Settings domain - appointment types, insurers and insurance plans"""
