import numpy as np

# Assumed number of interfaces behind a load balancer
Hypothesis = int

Probability = np.longdouble
