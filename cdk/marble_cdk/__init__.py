"""CDK stacks for the Marble website metadata API, static hosting and deployment pipelines."""
