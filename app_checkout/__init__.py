"""Niubiz checkout service: security token, payment session and card authorization."""
