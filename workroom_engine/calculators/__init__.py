"""
Product calculators.

Pure arithmetic. No I/O, no pricing.
Given validated measurements (cm) and workroom allowances, produce the
billable quantity (linear meters or square meters) with a step-by-step
FormulaBreakdown for the quote.
"""
