import os
import torch
import triton
from functions.VecAdd import vec_add_fn
from test_performance.performance_utils import profile


DEVICE = triton.runtime.driver.active.get_active_torch_device()

def torch_add(a, b):
    return a + b

# define inputs
size = 2**24
a  = torch.rand(size, dtype=torch.float32, device=DEVICE, requires_grad=True)
b  = torch.rand(size, dtype=torch.float32, device=DEVICE, requires_grad=True)
dc = torch.ones(size, dtype=torch.float32, device=DEVICE)

table_tri = profile(vec_add_fn, (a, b), do=dc, descript='triton_vec_add')
table_tt  = profile(torch_add, (a, b), do=dc, descript='torch_add')

# book results
os.makedirs('profile_results', exist_ok=True)
table_file = 'profile_results/vec_add_table.txt'
with open(table_file, mode='w') as f:
    f.write(table_tri)
    f.write(table_tt)
print(f'profile tables are written to {table_file}')

# commandline: python -m test_performance.vec_add.vec_add_torch_profile
