"""StocMed medication discovery backend"""
