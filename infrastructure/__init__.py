"""Static website infrastructure on S3, CloudFront and CodePipeline."""
