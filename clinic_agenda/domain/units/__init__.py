"""Units domain - clinic locations with opening hours and visit duration"""
