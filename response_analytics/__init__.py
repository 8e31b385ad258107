"""Response scoring and analytics aggregation engine"""
