"""A deliberately failing run: tapcheck run examples/sum/fail_sum.py"""
from tapcheck import describe


def sum_values(*values):
    return sum(values[1:])


describe(
    "sum()",
    lambda check: check(given="two numbers", should="add them", actual=sum_values(1, 2), expected=3),
)
