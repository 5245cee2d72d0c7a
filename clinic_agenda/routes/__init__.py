"""Routes that do not belong to a single domain"""
