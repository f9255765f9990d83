import sys
import os
# Add the project root to Python path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import numpy as np
import sympy as sp
from symbolic_calculus import (
  variable, times, power, function, E, differentiate, simplify,
  simplify_to_fixed_point, taylor_series, to_sympy, LogLevel, configure_logging
)


def derivative_demo():
  """Differentiate a damped oscillator and compare against SymPy"""
  x = variable('x')
  f = times(power(E, times(-1, x)), function('sin', times(3, x)))

  d = differentiate(f, 'x')
  print(f"f(x)         = {f.to_string()}")
  print(f"df/dx        = {d.to_string()}")
  print(f"legacy pass  = {simplify(d).to_string()}")
  print(f"fixed point  = {simplify_to_fixed_point(d).to_string()}")

  X = sp.Symbol('x')
  residual = sp.simplify(to_sympy(d, {'x': X}) - sp.diff(to_sympy(f, {'x': X}), X))
  print(f"SymPy residual: {residual}")


def taylor_demo():
  """Compare Taylor polynomials of exp(x) around 0 on a grid"""
  x = variable('x')
  X = sp.Symbol('x')
  grid = np.linspace(-1.0, 1.0, 5)
  for order in (1, 2, 4, 6):
    series = taylor_series(function('exp', x), 'x', 0, order)
    evaluate = sp.lambdify(X, to_sympy(series, {'x': X}), 'numpy')
    error = np.max(np.abs(evaluate(grid) - np.exp(grid)))
    print(f"order {order}: max error on [-1, 1] = {error:.3e}")


def main():
  configure_logging(LogLevel.MODERATE)
  print("=== Derivatives ===")
  derivative_demo()
  print("\n=== Taylor series ===")
  taylor_demo()


if __name__ == "__main__":
  main()
