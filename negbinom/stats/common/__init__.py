"""
negbinom.stats.common.__init__.py
=================================

Generic numerical building blocks.

- `special`: regularized incomplete beta function, its complement and derivative
- `roots`: bracketing plus Brent refinement for monotone functions
- `checks`: parameter and argument validation raising `DomainError`
"""
