"""Plants, crosses and whole-population turnover."""
