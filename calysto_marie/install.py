import json
import os
import sys
from tempfile import TemporaryDirectory

from jupyter_client.kernelspec import install_kernel_spec

from .kernel import CalystoMARIE

def install_my_kernel_spec(user=True):
    kernel_json = dict(CalystoMARIE.kernel_json, argv=[
        sys.executable,
        "-m", "calysto_marie",
        "-f", "{connection_file}"
    ])
    with TemporaryDirectory() as td:
        os.chmod(td, 0o755) # Starts off as 700, not user readable
        with open(os.path.join(td, 'kernel.json'), 'w') as f:
            json.dump(kernel_json, f, sort_keys=True)

        print('Installing Jupyter kernel spec')
        install_kernel_spec(td, 'calysto_marie', user=user)

def main(argv=None):
    install_my_kernel_spec()

if __name__ == '__main__':
    main()
