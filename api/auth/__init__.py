"""
Account sessions: cookie token -> Account -> Buyer / Company.
"""
