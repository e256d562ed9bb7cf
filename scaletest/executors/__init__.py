"""Executors and steps that install and run clusterloader2 and kube-burner."""