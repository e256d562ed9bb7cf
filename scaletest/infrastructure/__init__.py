"""Steps that install Cilium and fetch the kubeconfig of an existing AKS cluster."""