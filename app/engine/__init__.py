"""Reservation allocation and eligibility engine"""
